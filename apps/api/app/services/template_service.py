"""Template service - catalog reads and scaffolding actions onto ledgers."""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.core.ledger_catalog import (
    ActionDefinition,
    LedgerCatalog,
    TemplateDefinition,
    UnknownCatalogEntry,
)
from app.core.structured_logging import build_log_context
from app.db.enums import DEFAULT_ACTION_STATUS, LedgerRole
from app.db.models import Ledger, LedgerAction, LedgerAttachment
from app.schemas.auth import CurrentUser
from app.schemas.ledger_template import (
    ActionPreview,
    AppliedAction,
    AppliedTemplateResult,
    AttachmentSlotPreview,
    TemplateInfo,
    TemplateRead,
)
from app.services import ledger_activity_service
from app.services.ledger_service import LedgerValidationError, verify_access

logger = logging.getLogger(__name__)


# =============================================================================
# Catalog reads
# =============================================================================


def to_action_preview(definition: ActionDefinition) -> ActionPreview:
    return ActionPreview(
        type=definition.type,
        title=definition.title,
        description=definition.description,
        expected_attachments=[
            AttachmentSlotPreview(
                type=slot.type,
                slot_key=slot.slot_key,
                required=slot.required,
                description=slot.description,
            )
            for slot in definition.expected_attachments
        ],
    )


def _to_template_read(catalog: LedgerCatalog, template: TemplateDefinition) -> TemplateRead:
    return TemplateRead(
        template=TemplateInfo(
            id=template.id,
            name=template.name,
            description=template.description,
            category=template.category,
            action_types=list(template.action_types),
        ),
        actions=preview_actions(catalog, template.action_types),
    )


def preview_actions(catalog: LedgerCatalog, action_types) -> list[ActionPreview]:
    """Resolve keys to previews; an unknown key fails the whole call."""
    return [to_action_preview(d) for d in _resolve(catalog, action_types)]


def list_templates(catalog: LedgerCatalog) -> list[TemplateRead]:
    return [_to_template_read(catalog, t) for t in catalog.templates]


def get_template(catalog: LedgerCatalog, template_id: str) -> TemplateRead:
    try:
        template = catalog.get_template(template_id)
    except UnknownCatalogEntry as e:
        raise LedgerValidationError(e.args[0]) from e
    return _to_template_read(catalog, template)


def list_action_definitions(catalog: LedgerCatalog) -> list[ActionPreview]:
    return [to_action_preview(d) for d in catalog.actions.values()]


# =============================================================================
# Expansion
# =============================================================================


def _expand(
    db: Session,
    ledger_id: UUID,
    definitions: list[ActionDefinition],
    user: CurrentUser,
) -> AppliedTemplateResult:
    """
    Scaffold one action per definition, each with empty slots.

    Runs as a single unit: if any step fails the session is rolled back,
    so no partial scaffolding is left behind.
    """
    applied: list[AppliedAction] = []
    try:
        for definition in definitions:
            action = LedgerAction(
                ledger_id=ledger_id,
                title=definition.title,
                description=definition.description,
                status=DEFAULT_ACTION_STATUS.value,
                creator_user_id=user.user_id,
                creator_email=user.email,
            )
            db.add(action)
            db.flush()

            ledger_activity_service.log_action_created(
                db,
                ledger_id,
                action.id,
                action.title,
                user,
                action_type=definition.type,
            )

            for slot in definition.expected_attachments:
                db.add(
                    LedgerAttachment(
                        action_id=action.id,
                        type=slot.type.value,
                        slot_key=slot.slot_key,
                        data=None,  # Slots are never pre-filled
                        creator_user_id=user.user_id,
                        creator_email=user.email,
                    )
                )
            db.flush()

            applied.append(
                AppliedAction(
                    id=action.id,
                    title=action.title,
                    type=definition.type,
                    attachment_slots_created=len(definition.expected_attachments),
                )
            )
    except Exception:
        db.rollback()
        logger.exception(
            "Ledger template expansion failed; rolled back",
            extra=build_log_context(user_id=user.user_id, ledger_id=ledger_id),
        )
        raise

    logger.info(
        "Ledger scaffolded %d actions",
        len(applied),
        extra=build_log_context(user_id=user.user_id, ledger_id=ledger_id),
    )
    return AppliedTemplateResult(
        ledger_id=ledger_id,
        actions_created=len(applied),
        actions=applied,
    )


def _resolve(catalog: LedgerCatalog, action_types) -> list[ActionDefinition]:
    try:
        return catalog.resolve_actions(action_types)
    except UnknownCatalogEntry as e:
        raise LedgerValidationError(e.args[0]) from e


def apply_template(
    db: Session,
    catalog: LedgerCatalog,
    ledger_id: UUID,
    template_id: str,
    user: CurrentUser,
) -> AppliedTemplateResult:
    """Scaffold a catalog template's actions onto a ledger (EDITOR+)."""
    verify_access(db, ledger_id, user.user_id, LedgerRole.EDITOR)
    try:
        template = catalog.get_template(template_id)
    except UnknownCatalogEntry as e:
        raise LedgerValidationError(e.args[0]) from e
    return _expand(db, ledger_id, _resolve(catalog, template.action_types), user)


def apply_custom_actions(
    db: Session,
    catalog: LedgerCatalog,
    ledger_id: UUID,
    action_types: list[str],
    user: CurrentUser,
) -> AppliedTemplateResult:
    """
    Scaffold an ad-hoc list of action types (EDITOR+).

    Every key is checked before the first write.
    """
    verify_access(db, ledger_id, user.user_id, LedgerRole.EDITOR)
    return _expand(db, ledger_id, _resolve(catalog, action_types), user)


def suggest_actions(
    db: Session, catalog: LedgerCatalog, ledger_id: UUID, user_id: str
) -> list[ActionPreview]:
    """
    Heuristic follow-up suggestions (VIEWER+). Nothing is persisted.

    - More than two actions and none mentions "coordinate": COORDINATE_WITH_FAMILY
    - Memorial-linked ledger with no obituary/photo action: PUBLISH_OBITUARY,
      COLLECT_PHOTOS
    """
    verify_access(db, ledger_id, user_id, LedgerRole.VIEWER)
    ledger = db.scalar(
        select(Ledger)
        .options(selectinload(Ledger.actions))
        .where(Ledger.id == ledger_id)
        .execution_options(populate_existing=True)
    )
    titles = [action.title.lower() for action in ledger.actions]

    suggestions: list[str] = []
    if len(titles) > 2 and not any("coordinate" in t for t in titles):
        suggestions.append("COORDINATE_WITH_FAMILY")

    has_memorial_content = any("obituary" in t or "photo" in t for t in titles)
    if not has_memorial_content and ledger.linked_entity_type == "memorial":
        suggestions.extend(["PUBLISH_OBITUARY", "COLLECT_PHOTOS"])

    return preview_actions(catalog, suggestions)
