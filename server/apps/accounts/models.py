"""Database models for accounts app."""

from typing import Final, final, override

from django.conf import settings
from django.core.validators import URLValidator
from django.db import models

_PROFILE_IMAGE_MAX_LENGTH: Final = 2048

profile_image_validator = URLValidator(schemes=['http', 'https'])


@final
class UserProfile(models.Model):
    """Profile data of a user.

    Holds the location of the user's single optional profile image.
    Created on demand the first time it is needed.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='profile',
        primary_key=True,
    )

    profile_image = models.URLField(
        max_length=_PROFILE_IMAGE_MAX_LENGTH,
        null=True,
        blank=True,
        default=None,
        validators=[profile_image_validator],
        help_text='Public URL of the profile image, null when absent',
    )

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'User Profile'  # type: ignore[mutable-override]
        verbose_name_plural = 'User Profiles'  # type: ignore[mutable-override]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.user.username}: {self.profile_image or "-"}'
