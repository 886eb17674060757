MSG_TOO_LARGE = "Ukuran file terlalu besar! Maksimal 20MB."
MSG_NO_FILE = "Tidak ada file yang diunggah."
MSG_UNSUPPORTED = "Format file tidak didukung. Hanya Mendukuang Gambar, Video, PDF, & Audio."
MSG_SINK_FAILED = "Gagal mengupload file."
MSG_REQUEST_FAILED = "Terjadi kesalahan saat upload file."


class UploadValidationError(ValueError):
    """Rejected upload. ``str(exc)`` is safe to show to the user."""

    message = MSG_REQUEST_FAILED

    def __init__(self, message=None):
        super().__init__(message or self.message)


class FileTooLargeError(UploadValidationError):
    message = MSG_TOO_LARGE


class NoFileError(UploadValidationError):
    message = MSG_NO_FILE


class UnsupportedFormatError(UploadValidationError):
    message = MSG_UNSUPPORTED


class SinkError(RuntimeError):
    """The upload sink could not store the file."""
