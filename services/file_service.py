import os
import re
import uuid

from config import Config
from .exceptions import UnsupportedTypeError


class FileService:
    MIME_TYPES = {
        "application/pdf": "pdf",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": "excel",
        "application/vnd.ms-excel": "excel",
        "text/csv": "csv",
    }
    EXTENSIONS = {
        ".pdf": "pdf",
        ".xlsx": "excel",
        ".xls": "excel",
        ".csv": "csv",
    }

    @classmethod
    def _unicode_safe_filename(cls, filename):
        """
        Create a safe filename that preserves Unicode characters while removing dangerous ones.
        Falls back to UUID-based naming if the filename becomes too problematic.
        """
        if not filename:
            return None

        name_part, ext = os.path.splitext(os.path.basename(filename))
        ext = ext.lower()

        dangerous_chars = r'[<>:"/\\|?*\x00-\x1f\x7f-\x9f]'
        safe_name = re.sub(dangerous_chars, "", name_part).strip(". ")

        if not safe_name:
            safe_name = f"file_{str(uuid.uuid4())[:8]}"

        if len(safe_name) > 200:
            safe_name = safe_name[:200]

        return safe_name + ext

    @classmethod
    def get_file_type(cls, mimetype, filename=None):
        # known extension wins over the declared MIME type
        if filename:
            file_type = cls.EXTENSIONS.get(os.path.splitext(filename)[1].lower())
            if file_type:
                return file_type

        if mimetype:
            return cls.MIME_TYPES.get(mimetype.split(";")[0].strip().lower())

        return None

    @classmethod
    def read_upload(cls, file):
        if not file or not file.filename:
            raise ValueError("No file uploaded or empty filename")

        file_type = cls.get_file_type(file.mimetype, file.filename)
        if not file_type:
            raise UnsupportedTypeError(
                "Invalid file type. Only PDF, Excel, and CSV files are supported"
            )

        data = file.read()
        if not data:
            raise ValueError("Uploaded file is empty")

        if len(data) > Config.MAX_UPLOAD_SIZE:
            raise ValueError(
                f"File too large. Maximum size is {Config.MAX_UPLOAD_SIZE // (1024 * 1024)}MB"
            )

        return data, cls._unicode_safe_filename(file.filename), file_type
