from video_ai.models.generated_content import GeneratedContent

__all__ = ["GeneratedContent"]
