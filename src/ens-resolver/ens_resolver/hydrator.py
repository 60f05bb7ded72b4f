"""
Fill a Profile with the address and requested text records of an ENS name.

Order of work for one name:
  1. locate the resolver binding (nothing else happens without one)
  2. address, from the name's node then the binding node
  3. avatar, with a single-level parent fallback
  4. alias groups such as com.twitter / twitter, resolved once per group
  5. every other requested key

Failures past step 1 keep whatever was already populated; the cause is returned
alongside the profile.
"""

import logging
from typing import Dict, Iterable, Optional

from .locator import ResolverLocator
from .models import (
    AVATAR_KEY,
    Profile,
    ProfileField,
    ResolutionResult,
    ResolutionStatus,
    field_for_key,
)
from .records import RecordReader
from .resolver import BoundResolver

logger = logging.getLogger(__name__)


def collect_requested(keys: Iterable[object]) -> Dict[str, str]:
    """Map lowercased key -> first spelling requested, skipping empty and non-string keys."""
    requested: Dict[str, str] = {}
    for key in keys:
        if not isinstance(key, str) or not key:
            continue
        requested.setdefault(key.lower(), key)
    return requested


class ProfileHydrator:
    def __init__(
        self,
        locator: ResolverLocator,
        reader: RecordReader,
        address_fallback: bool = True,
    ) -> None:
        self.locator = locator
        self.reader = reader
        self.address_fallback = address_fallback

    def bind(self, name: str) -> Optional[BoundResolver]:
        binding = self.locator.locate(name)
        if binding is None:
            return None
        return BoundResolver(
            name,
            binding,
            self.reader,
            self.locator,
            address_fallback=self.address_fallback,
        )

    def hydrate(
        self,
        name: str,
        requested_keys: Iterable[object],
        profile: Optional[Profile] = None,
    ) -> ResolutionResult:
        if profile is None:
            profile = Profile()
        profile.name = name
        found_address = False

        try:
            bound = self.bind(name)
            if bound is None:
                return ResolutionResult(profile, ResolutionStatus.NOT_FOUND)

            address = bound.address()
            if address:
                profile.address = address
                found_address = True

            requested = collect_requested(requested_keys)
            self._apply_avatar(bound, profile, requested)
            for profile_field in ProfileField:
                if profile_field.is_alias_group:
                    self._apply_alias_group(bound, profile, profile_field, requested)
            self._apply_remaining(bound, profile, requested)
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception("ENS resolution of %s stopped early", name)
            status = (
                ResolutionStatus.PARTIAL
                if found_address or profile.has_records()
                else ResolutionStatus.NOT_FOUND
            )
            return ResolutionResult(profile, status, cause=exc)

        status = (
            ResolutionStatus.RESOLVED
            if found_address or profile.has_records()
            else ResolutionStatus.NOT_FOUND
        )
        return ResolutionResult(profile, status)

    def _apply_avatar(self, bound: BoundResolver, profile: Profile, requested: Dict[str, str]) -> None:
        output_key = requested.pop(AVATAR_KEY, None)
        if output_key is None:
            return
        avatar = bound.avatar()
        if avatar is not None:
            profile.set_field(ProfileField.AVATAR, avatar)
            profile.texts[output_key] = avatar

    def _apply_alias_group(
        self,
        bound: BoundResolver,
        profile: Profile,
        profile_field: ProfileField,
        requested: Dict[str, str],
    ) -> None:
        asked = [key for key in profile_field.keys if key in requested]
        if not asked:
            return
        value = bound.first_text(profile_field.keys)
        output_keys = [requested.pop(key) for key in asked]
        if value is None:
            return
        for output_key in output_keys:
            profile.texts[output_key] = value
        profile.set_field(profile_field, value)

    def _apply_remaining(self, bound: BoundResolver, profile: Profile, requested: Dict[str, str]) -> None:
        for key, output_key in requested.items():
            value = bound.text(key)
            if value is None:
                continue
            profile.texts[output_key] = value
            profile_field = field_for_key(key)
            if profile_field is not None:
                profile.set_field(profile_field, value)
