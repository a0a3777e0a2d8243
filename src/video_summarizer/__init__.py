from video_summarizer.errors import SummarizationError
from video_summarizer.summarizer import Summarizer, VideoSummary

__all__ = ["SummarizationError", "Summarizer", "VideoSummary"]
