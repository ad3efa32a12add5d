from .service import LANDSCAPE, PORTRAIT, MediaService, VideoFormat

__all__ = ["LANDSCAPE", "PORTRAIT", "MediaService", "VideoFormat"]
