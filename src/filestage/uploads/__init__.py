from .temp_area import TempUploadArea, UploadedFile, UploadSource

__all__ = ["TempUploadArea", "UploadedFile", "UploadSource"]
