from app.models.user import User
from app.models.generated_image import GeneratedImage

__all__ = ["User", "GeneratedImage"]
