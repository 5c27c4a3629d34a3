from django.db import models
from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.utils.translation import gettext_lazy as _
import uuid


# ==============================
# Custom User Manager
# ==============================
class UserManager(BaseUserManager):
    """
    Custom user manager that uses email instead of username for authentication.
    """
    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError(_('Users must have an email address'))
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        return self.create_user(email, password, **extra_fields)


# ==============================
# Custom User Model
# ==============================
class User(AbstractUser):
    """
    Extended User model with UUID and email-based authentication.

    The UUID primary key is the stable identifier every relationship row
    points at. Pairs are ordered by the canonical string form of this id
    (see ``apps.matching.models.canonical_pair``).
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, max_length=255)
    username = models.CharField(max_length=150, unique=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['username']

    def __str__(self):
        return self.username or self.email

    @property
    def display_name(self):
        return self.first_name or self.username or 'Someone'


# ==============================
# Profile Model
# ==============================
class Profile(models.Model):
    """
    Display fields and balances owned by the profile subsystem.
    The relationship engine only reads these, except for ``boost_count``
    which the boost allocator draws down and the counters kept by signals.
    """

    user = models.OneToOneField(
        User, on_delete=models.CASCADE, related_name='profile', primary_key=True
    )
    bio = models.TextField(blank=True, help_text=_('Short biography or description'))
    photos = models.JSONField(default=list, blank=True, help_text=_('Ordered list of photo URLs'))

    # Billing (set by the subscription webhook)
    is_premium = models.BooleanField(default=False)
    boost_count = models.PositiveIntegerField(
        default=0, help_text=_('Remaining profile boosts')
    )

    notifications_enabled = models.BooleanField(default=True)

    # Statistics
    total_matches = models.PositiveIntegerField(default=0)
    profile_views = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'profiles'

    def __str__(self):
        return f"Profile of {self.user.username}"

    @property
    def primary_photo(self):
        return self.photos[0] if self.photos else None


# ==============================
# Device Token
# ==============================
class DeviceToken(models.Model):
    """
    Expo push token for one of the user's devices.
    """
    PLATFORMS = [
        ('ios', 'iOS'),
        ('android', 'Android'),
    ]

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='device_tokens')
    token = models.CharField(max_length=255)
    platform = models.CharField(max_length=10, choices=PLATFORMS)
    device_type = models.CharField(max_length=100, blank=True)
    is_active = models.BooleanField(default=True)
    last_seen_at = models.DateTimeField(auto_now=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'device_tokens'
        unique_together = ['user', 'token']
        ordering = ['-last_seen_at']

    def __str__(self):
        return f"{self.platform} token for {self.user.username}"
