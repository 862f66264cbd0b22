"""Apply a PartialSelect to a stored document."""

import copy
from collections.abc import Mapping
from typing import Any

from docstore.errors import InvalidProjection
from docstore.models.partial_select import PartialSelect
from docstore.models.path import NOT_FOUND, assign, resolve
from docstore.models.values import is_mapping


def project(document: Mapping[str, Any], partial_select: PartialSelect) -> dict[str, Any]:
    """Build the partial document described by ``partial_select``.

    Entries are applied in declaration order, so later fields and merges
    overwrite keys written by earlier ones.

    Raises:
        InvalidProjection: If a merged field holds something other than a mapping.
    """
    partial_doc: dict[str, Any] = {}

    for entry in partial_select.fields:
        value = resolve(document, entry.field)
        if value is NOT_FOUND:
            value = None
        else:
            value = copy.deepcopy(value)

        if entry.is_merge:
            if value is None:
                continue
            if not is_mapping(value):
                raise InvalidProjection(
                    f"Merge not possible. {entry.alias} alias was specified for field: {entry.field} "
                    f"but field value is not a mapping: {value!r}"
                )
            partial_doc.update(value)
            continue

        assign(partial_doc, entry.alias, value)

    return partial_doc
