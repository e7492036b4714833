"""Catalog integrity and lookups."""

import pytest

from app.core.ledger_catalog import (
    ActionDefinition,
    AttachmentSlotDefinition,
    LedgerCatalog,
    TemplateDefinition,
    UnknownCatalogEntry,
    default_catalog,
)
from app.db.enums import LedgerAttachmentType


def _action(type_: str, *slot_keys: str) -> ActionDefinition:
    return ActionDefinition(
        type=type_,
        title=type_.title(),
        description=None,
        expected_attachments=tuple(
            AttachmentSlotDefinition(type=LedgerAttachmentType.NOTE, slot_key=k, required=False)
            for k in slot_keys
        ),
    )


def test_default_catalog_templates_resolve():
    for template in default_catalog.templates:
        resolved = default_catalog.resolve_actions(template.action_types)
        assert [a.type for a in resolved] == list(template.action_types)


def test_slot_keys_unique_within_each_action():
    for action in default_catalog.actions.values():
        keys = [slot.slot_key for slot in action.expected_attachments]
        assert len(keys) == len(set(keys)), action.type


def test_template_with_unknown_action_is_rejected():
    with pytest.raises(ValueError, match="unknown action types"):
        LedgerCatalog(
            [_action("A", "note-a")],
            [TemplateDefinition("t", "T", "", "misc", ("A", "B"))],
        )


def test_duplicate_slot_keys_are_rejected():
    with pytest.raises(ValueError, match="duplicate slot keys"):
        LedgerCatalog([_action("A", "note-a", "note-a")], [])


def test_unknown_lookups_raise():
    with pytest.raises(UnknownCatalogEntry):
        default_catalog.get_action("NOPE")
    with pytest.raises(UnknownCatalogEntry):
        default_catalog.get_template("nope")


def test_catalog_is_read_only():
    with pytest.raises(TypeError):
        default_catalog.actions["NEW"] = _action("NEW")
