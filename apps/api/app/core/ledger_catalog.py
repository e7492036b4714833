"""Server-owned action definitions and templates for ledgers.

The catalog is the single source of truth for which attachment slots an
action type expects. It is built once at import time, never mutated, and
handed to the template service through a dependency.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping

from app.db.enums import LedgerAttachmentType


@dataclass(frozen=True)
class AttachmentSlotDefinition:
    type: LedgerAttachmentType
    slot_key: str
    required: bool
    description: str | None = None


@dataclass(frozen=True)
class ActionDefinition:
    type: str
    title: str
    description: str | None
    expected_attachments: tuple[AttachmentSlotDefinition, ...]


@dataclass(frozen=True)
class TemplateDefinition:
    id: str
    name: str
    description: str
    category: str
    action_types: tuple[str, ...]  # Keys into the action definitions


class UnknownCatalogEntry(KeyError):
    """Raised for an action type or template id the catalog does not define."""


class LedgerCatalog:
    """Read-only lookup over action and template definitions."""

    def __init__(
        self,
        actions: Iterable[ActionDefinition],
        templates: Iterable[TemplateDefinition],
    ):
        action_map = {action.type: action for action in actions}
        template_map = {template.id: template for template in templates}

        for template in template_map.values():
            missing = [t for t in template.action_types if t not in action_map]
            if missing:
                raise ValueError(
                    f"Template {template.id} references unknown action types: {missing}"
                )
        for action in action_map.values():
            keys = [slot.slot_key for slot in action.expected_attachments]
            if len(keys) != len(set(keys)):
                raise ValueError(f"Action {action.type} declares duplicate slot keys")

        self._actions: Mapping[str, ActionDefinition] = MappingProxyType(action_map)
        self._templates: Mapping[str, TemplateDefinition] = MappingProxyType(template_map)

    @property
    def actions(self) -> Mapping[str, ActionDefinition]:
        return self._actions

    @property
    def templates(self) -> list[TemplateDefinition]:
        return list(self._templates.values())

    def get_action(self, action_type: str) -> ActionDefinition:
        try:
            return self._actions[action_type]
        except KeyError:
            raise UnknownCatalogEntry(f"Action type {action_type} not found") from None

    def get_template(self, template_id: str) -> TemplateDefinition:
        try:
            return self._templates[template_id]
        except KeyError:
            raise UnknownCatalogEntry(f"Template {template_id} not found") from None

    def resolve_actions(self, action_types: Iterable[str]) -> list[ActionDefinition]:
        """Look up every key up front; fails on the first unknown one."""
        return [self.get_action(action_type) for action_type in action_types]


def _slot(
    type_: LedgerAttachmentType, slot_key: str, required: bool, description: str
) -> AttachmentSlotDefinition:
    return AttachmentSlotDefinition(
        type=type_, slot_key=slot_key, required=required, description=description
    )


Q = LedgerAttachmentType.UNDERWORLD_QUERY
BUSINESS = LedgerAttachmentType.UNDERWORLD_BUSINESS_REFERENCE
SERVICE = LedgerAttachmentType.UNDERWORLD_SERVICE_REFERENCE
NOTE = LedgerAttachmentType.NOTE
LINK = LedgerAttachmentType.LINK
FUNDRAISER = LedgerAttachmentType.FUNDRAISER_REFERENCE
MEMORIAL = LedgerAttachmentType.MEMORIAL_REFERENCE


ACTION_DEFINITIONS: tuple[ActionDefinition, ...] = (
    # Memorial service planning
    ActionDefinition(
        type="BOOK_VENUE",
        title="Book service venue",
        description="Find and book a venue for the memorial service",
        expected_attachments=(
            _slot(Q, "underworld-query", True, "Search query for venues"),
            _slot(BUSINESS, "selected-business", False, "Selected venue"),
            _slot(NOTE, "note-preferences", False, "Venue preferences and requirements"),
        ),
    ),
    ActionDefinition(
        type="HIRE_CATERER",
        title="Hire catering service",
        description="Find and hire a caterer for the memorial service",
        expected_attachments=(
            _slot(Q, "underworld-query", True, "Search query for caterers"),
            _slot(BUSINESS, "selected-business", False, "Selected caterer"),
            _slot(SERVICE, "selected-service", False, "Selected catering package"),
            _slot(NOTE, "note-dietary", False, "Dietary restrictions and preferences"),
        ),
    ),
    ActionDefinition(
        type="ORDER_FLOWERS",
        title="Order flowers",
        description="Order floral arrangements for the service",
        expected_attachments=(
            _slot(Q, "underworld-query", True, "Search query for florists"),
            _slot(BUSINESS, "selected-business", False, "Selected florist"),
            _slot(NOTE, "note-arrangements", False, "Flower preferences and arrangements"),
        ),
    ),
    ActionDefinition(
        type="ARRANGE_TRANSPORTATION",
        title="Arrange transportation",
        description="Coordinate transportation logistics",
        expected_attachments=(
            _slot(Q, "underworld-query", True, "Search query for transportation services"),
            _slot(BUSINESS, "selected-business", False, "Selected transportation provider"),
            _slot(NOTE, "note-logistics", False, "Transportation details and schedule"),
        ),
    ),
    # Fundraising
    ActionDefinition(
        type="CREATE_FUNDRAISER",
        title="Set up fundraiser",
        description="Create and configure a fundraising campaign",
        expected_attachments=(
            _slot(FUNDRAISER, "fundraiser-ref", False, "Link to created fundraiser"),
            _slot(NOTE, "note-campaign", False, "Campaign details and goals"),
        ),
    ),
    # Memorial content
    ActionDefinition(
        type="PUBLISH_OBITUARY",
        title="Publish obituary",
        description="Write and publish the obituary",
        expected_attachments=(
            _slot(MEMORIAL, "memorial-ref", True, "Associated memorial"),
            _slot(LINK, "link-obituary", False, "Link to published obituary"),
            _slot(NOTE, "note-draft", False, "Draft notes and key information"),
        ),
    ),
    ActionDefinition(
        type="COLLECT_PHOTOS",
        title="Collect photos and memories",
        description="Gather photos and stories from family and friends",
        expected_attachments=(
            _slot(MEMORIAL, "memorial-ref", True, "Memorial to add photos to"),
            _slot(NOTE, "note-sources", False, "Sources and contacts for photos"),
        ),
    ),
    # Generic
    ActionDefinition(
        type="CONTACT_PERSON",
        title="Contact someone",
        description="Reach out to a specific person",
        expected_attachments=(
            _slot(NOTE, "note-contact-info", True, "Contact information"),
            _slot(NOTE, "note-purpose", False, "Purpose of contact"),
        ),
    ),
    ActionDefinition(
        type="COORDINATE_WITH_FAMILY",
        title="Coordinate with family",
        description="Discuss plans and decisions with family members",
        expected_attachments=(
            _slot(NOTE, "note-attendees", False, "Family members involved"),
            _slot(NOTE, "note-topics", False, "Topics to discuss"),
        ),
    ),
)


TEMPLATE_DEFINITIONS: tuple[TemplateDefinition, ...] = (
    TemplateDefinition(
        id="memorial-service-full",
        name="Full Memorial Service",
        description=(
            "Complete checklist for planning a memorial service including venue, "
            "catering, flowers, and coordination"
        ),
        category="memorial-service",
        action_types=(
            "BOOK_VENUE",
            "HIRE_CATERER",
            "ORDER_FLOWERS",
            "ARRANGE_TRANSPORTATION",
            "COORDINATE_WITH_FAMILY",
            "PUBLISH_OBITUARY",
            "COLLECT_PHOTOS",
        ),
    ),
    TemplateDefinition(
        id="memorial-service-basic",
        name="Basic Memorial Service",
        description="Essential tasks for a simple memorial service",
        category="memorial-service",
        action_types=("BOOK_VENUE", "COORDINATE_WITH_FAMILY", "PUBLISH_OBITUARY"),
    ),
    TemplateDefinition(
        id="fundraising-campaign",
        name="Fundraising Campaign",
        description="Set up and manage a fundraising campaign",
        category="fundraising",
        action_types=(
            "CREATE_FUNDRAISER",
            "PUBLISH_OBITUARY",
            "COLLECT_PHOTOS",
            "COORDINATE_WITH_FAMILY",
        ),
    ),
    TemplateDefinition(
        id="memorial-content",
        name="Memorial Content Creation",
        description="Focus on creating and gathering content for the memorial page",
        category="memorial",
        action_types=("PUBLISH_OBITUARY", "COLLECT_PHOTOS"),
    ),
)


default_catalog = LedgerCatalog(ACTION_DEFINITIONS, TEMPLATE_DEFINITIONS)
