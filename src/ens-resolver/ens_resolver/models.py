from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

# Core EIP-634 keys plus the common social keys.
DEFAULT_RECORDS: Tuple[str, ...] = (
    "avatar",
    "url",
    "email",
    "description",
    "com.twitter",
    "twitter",
    "com.github",
    "github",
)

AVATAR_KEY = "avatar"


@dataclass(frozen=True)
class ResolverBinding:
    """Resolver found for a name and the node it was registered on."""

    resolver: str
    node: str


class ProfileField(Enum):
    AVATAR = "avatar"
    URL = "url"
    EMAIL = "email"
    DESCRIPTION = "description"
    TWITTER = "twitter"
    GITHUB = "github"
    DISCORD = "discord"
    TELEGRAM = "telegram"
    REDDIT = "reddit"
    LINKEDIN = "linkedin"

    @property
    def keys(self) -> Tuple[str, ...]:
        """Text record keys feeding this field, preferred key first."""
        return FIELD_KEYS[self]

    @property
    def is_alias_group(self) -> bool:
        return len(self.keys) > 1


FIELD_KEYS: Dict[ProfileField, Tuple[str, ...]] = {
    ProfileField.AVATAR: ("avatar",),
    ProfileField.URL: ("url",),
    ProfileField.EMAIL: ("email",),
    ProfileField.DESCRIPTION: ("description",),
    ProfileField.TWITTER: ("com.twitter", "twitter"),
    ProfileField.GITHUB: ("com.github", "github"),
    ProfileField.DISCORD: ("com.discord",),
    ProfileField.TELEGRAM: ("org.telegram",),
    ProfileField.REDDIT: ("com.reddit",),
    ProfileField.LINKEDIN: ("com.linkedin",),
}

KEY_TO_FIELD: Dict[str, ProfileField] = {
    key: profile_field for profile_field, keys in FIELD_KEYS.items() for key in keys
}


def field_for_key(key: str) -> Optional[ProfileField]:
    return KEY_TO_FIELD.get(key.lower())


@dataclass
class Profile:
    name: Optional[str] = None
    address: Optional[str] = None
    avatar: Optional[str] = None
    url: Optional[str] = None
    email: Optional[str] = None
    description: Optional[str] = None
    twitter: Optional[str] = None
    github: Optional[str] = None
    discord: Optional[str] = None
    telegram: Optional[str] = None
    reddit: Optional[str] = None
    linkedin: Optional[str] = None
    # Every resolved text record, keyed as requested.
    texts: Dict[str, str] = field(default_factory=dict)

    def set_field(self, profile_field: ProfileField, value: str) -> None:
        setattr(self, profile_field.value, value)

    def get_field(self, profile_field: ProfileField) -> Optional[str]:
        return getattr(self, profile_field.value)

    def has_records(self) -> bool:
        return bool(self.texts) or any(self.get_field(f) for f in ProfileField)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"name": self.name, "address": self.address}
        for profile_field in ProfileField:
            out[profile_field.value] = self.get_field(profile_field)
        out["texts"] = dict(self.texts)
        return out


class ResolutionStatus(Enum):
    RESOLVED = "resolved"
    PARTIAL = "partial"
    NOT_FOUND = "not_found"


@dataclass
class ResolutionResult:
    profile: Profile
    status: ResolutionStatus
    cause: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.status is ResolutionStatus.RESOLVED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "profile": self.profile.to_dict(),
            "status": self.status.value,
            "error": str(self.cause) if self.cause is not None else None,
        }
