from video_ai.db.base_class import Base  # noqa: F401

# Import all the models here so that Base has them registered
# This file should NOT be imported by models.
from video_ai.models.generated_content import GeneratedContent  # noqa: F401
