"""Upload adapters."""

from .shell_upload import ShellUploadAdapter, UploadError

__all__ = ["ShellUploadAdapter", "UploadError"]
