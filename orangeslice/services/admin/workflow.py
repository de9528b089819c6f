# orangeslice/services/admin/workflow.py
from __future__ import annotations

from typing import Iterable, List, Optional
from uuid import UUID

from orangeslice.common.logging import get_logger
from orangeslice.common.strings.splitters import dedupe_keep_order
from orangeslice.common.status_log import StatusLog
from orangeslice.domain.dataclasses.reports import SaveReport
from orangeslice.domain.entities.entry import Entry, EntryFields
from orangeslice.domain.entities.links.entry_tag_link import EntryTag
from orangeslice.domain.errors import GatewayError
from orangeslice.domain.policies.editor import EditorRegistry
from orangeslice.domain.ports.gateway import DataGatewayPort

logger = get_logger(__name__)

class EntryWorkflow:
    """
    Administrator create / edit / delete of an entry and its tag links.

    Link changes go through the gateway's batch writes, so each batch lands
    whole or not at all. When a later step fails after an earlier one
    succeeded, a compensating action puts the earlier state back:

        create: entry created, links fail     -> delete the new entry
        edit:   old links deleted, new fail   -> re-create the old links
        delete: links deleted, entry survives -> re-create the links

    Failures never propagate to the caller. They are written to the status
    log and returned in the SaveReport. An EditorBusy from the registry is
    the one exception, since it means the save never started.
    """

    def __init__(self, gateway: DataGatewayPort, editors: EditorRegistry, status_log: StatusLog) -> None:
        self.gateway = gateway
        self.editors = editors
        self.status = status_log

    # ---------- public operations ----------

    def create(self, fields: EntryFields, tag_ids: Iterable[UUID] = ()) -> SaveReport:
        report = SaveReport(operation="create", tag_ids=dedupe_keep_order(tag_ids))
        report.start()
        editor = self.editors.open_create()
        try:
            if not self._validate(report, fields):
                return report
            editor.begin_submit()

            try:
                entry = self.gateway.entries.create(**fields.normalized().as_dict())
            except GatewayError as e:
                self._fail(report, "create_entry", e)
                return report
            report.entry_id = entry.id
            editor.bind(entry.id)
            report.step("create_entry")

            try:
                self._link(entry.id, report.tag_ids, report)
            except GatewayError as e:
                self._fail(report, "create_links", e)
                self._compensate(report, lambda: self.gateway.entries.delete(entry.id))
            return report
        finally:
            self._close(report, editor)

    def edit(self, entry_id: UUID, fields: EntryFields, tag_ids: Iterable[UUID] = ()) -> SaveReport:
        report = SaveReport(operation="edit", entry_id=entry_id, tag_ids=dedupe_keep_order(tag_ids))
        report.start()
        editor = self.editors.open_edit(entry_id)
        try:
            if not self._exists(entry_id, report):
                return report
            if not self._validate(report, fields):
                return report
            editor.begin_submit()

            try:
                self.gateway.entries.update(entry_id, **fields.normalized().as_dict())
            except GatewayError as e:
                self._fail(report, "update_entry", e)
                return report
            report.step("update_entry")

            try:
                previous = self._links_of(entry_id)
                self._unlink(previous, report)
            except GatewayError as e:
                self._fail(report, "delete_links", e)
                return report

            try:
                self._link(entry_id, report.tag_ids, report)
            except GatewayError as e:
                self._fail(report, "create_links", e)
                self._compensate(report, lambda: self.gateway.entry_tags.create_many([p.spec() for p in previous]))
            return report
        finally:
            self._close(report, editor)

    def delete(self, entry_id: UUID, *, confirmed: bool) -> SaveReport:
        report = SaveReport(operation="delete", entry_id=entry_id)
        report.start()
        if not confirmed:
            report.invalid({"confirm": "Deleting an entry must be confirmed"})
            self._close(report, None)
            return report

        editor = self.editors.open_edit(entry_id)
        try:
            if not self._exists(entry_id, report):
                return report
            editor.begin_submit()

            try:
                previous = self._links_of(entry_id)
                report.tag_ids = [p.tag_id for p in previous]
                self._unlink(previous, report)
            except GatewayError as e:
                self._fail(report, "delete_links", e)
                return report

            try:
                self.gateway.entries.delete(entry_id)
                report.step("delete_entry")
            except GatewayError as e:
                self._fail(report, "delete_entry", e)
                self._compensate(report, lambda: self.gateway.entry_tags.create_many([p.spec() for p in previous]))
            return report
        finally:
            self._close(report, editor)

    # ---------- steps ----------

    def _validate(self, report: SaveReport, fields: EntryFields) -> bool:
        errors = fields.validate()
        if report.tag_ids:
            try:
                known = {t.id for t in self.gateway.tags.list()}
            except GatewayError as e:
                self._fail(report, "load_tags", e)
                return False
            unknown = [str(t) for t in report.tag_ids if t not in known]
            if unknown:
                errors["tag_ids"] = f"Unknown tag(s): {', '.join(unknown)}"
        if errors:
            report.invalid(errors)
            return False
        return True

    def _exists(self, entry_id: UUID, report: SaveReport) -> Optional[Entry]:
        try:
            found = self.gateway.entries.get(entry_id)
        except GatewayError as e:
            self._fail(report, "load_entry", e)
            return None
        if found is None:
            report.not_found = True
            report.add_error("entry", f"Entry {entry_id} not found")
        return found

    def _links_of(self, entry_id: UUID) -> List[EntryTag]:
        return self.gateway.entry_tags.list({"entry_id": entry_id})

    def _unlink(self, links: List[EntryTag], report: SaveReport) -> None:
        self.gateway.entry_tags.delete_many([link.id for link in links])
        report.links_deleted = len(links)
        report.step("delete_links")

    def _link(self, entry_id: UUID, tag_ids: List[UUID], report: SaveReport) -> None:
        created = self.gateway.entry_tags.create_many(
            [{"entry_id": entry_id, "tag_id": t} for t in tag_ids]
        )
        report.links_created = len(created)
        report.step("create_links")

    def _fail(self, report: SaveReport, step: str, exc: Exception) -> None:
        report.add_error(step, str(exc))

    def _compensate(self, report: SaveReport, undo) -> None:
        try:
            undo()
        except GatewayError as e:
            report.add_error("compensate", str(e))
            logger.error("Compensation for %s %s failed: %s", report.operation, report.entry_id, e)
            return
        report.compensated = True
        report.step("compensate")

    def _close(self, report: SaveReport, editor) -> None:
        report.stop()
        if editor is not None:
            self.editors.release(editor)
        if report.ok:
            self.status.info(report.summary())
        else:
            self.status.error(report.summary())
