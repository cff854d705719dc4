"""Tests for load/save/delete and the sync extension point."""
from appmodel.model import Model, SyncAction

from tests.conftest import SignalRecorder, StrictNote


class RecordingModel(Model):
    """Stores sync calls and answers them with a canned response."""

    def __init__(self, *args, response=None, err=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls = []
        self.response = response
        self.err = err

    def sync(self, action, options=None, callback=None):
        self.calls.append((action, options))
        if callback is not None:
            callback(self.err, self.response)


class TestDefaultSync:

    def test_sync_never_calls_back(self, model):
        called = []
        model.sync(SyncAction.GET, None, lambda err, response: called.append(err))
        assert called == []

    def test_url_empty(self, model):
        assert model.url() == ""

    def test_save_without_persistence(self, model, changes):
        assert model.save({"name": "x"}) is True
        assert model.get("name") == "x"
        assert len(changes) == 1
        # nothing was stored, so the model is still new and modified
        assert model.is_new()
        assert model.is_modified()

    def test_load_and_delete_are_noops(self, model, changes):
        model.load()
        model.delete()
        assert len(changes) == 0

    def test_save_rejected_by_validation(self, strict_note):
        assert strict_note.save({"title": ""}) is False
        assert strict_note.get("title") == "Draft"


class TestSyncDelegation:

    def test_save_new_model_creates(self, id_generator):
        model = RecordingModel(id_generator=id_generator, response='{"id": "7"}')

        assert model.save({"name": "x"}, options={"src": "form"}) is True

        assert model.calls == [(SyncAction.CREATE, {"src": "form"})]
        assert model.get("id") == "7"
        assert not model.is_new()
        assert not model.is_modified()

    def test_save_existing_model_updates(self, id_generator):
        model = RecordingModel({"id": "7"}, id_generator=id_generator)
        model.set({"name": "y"})

        model.save()

        assert model.calls == [(SyncAction.UPDATE, None)]
        assert model.changed == {}

    def test_load_applies_response(self, id_generator):
        model = RecordingModel({"id": "7"}, id_generator=id_generator, response={"name": "loaded"})
        changes = SignalRecorder()
        model.change.connect(changes.record)

        model.load()

        assert model.calls == [(SyncAction.GET, None)]
        assert model.get("name") == "loaded"
        assert len(changes) == 1
        assert not model.is_modified()

    def test_failed_sync_leaves_model_untouched(self, id_generator):
        model = RecordingModel(
            {"id": "7"}, id_generator=id_generator,
            response={"name": "loaded"}, err=RuntimeError("offline"),
        )
        model.set({"name": "local"})

        model.load()

        assert model.get("name") == "local"
        assert model.changed == {"name": "local"}

    def test_unparseable_response_reports_error(self, id_generator):
        model = RecordingModel({"id": "7"}, id_generator=id_generator, response="<html>")
        errors = SignalRecorder()
        model.error.connect(errors.record)
        model.set({"name": "local"})

        model.load()

        assert len(errors) == 1
        assert model.changed == {"name": "local"}

    def test_delete(self, id_generator):
        model = RecordingModel({"id": "7"}, id_generator=id_generator, response='{"ignored": true}')

        model.delete()

        assert model.calls == [(SyncAction.DELETE, None)]
        assert model.get("ignored") is None

    def test_invalid_response_not_applied(self, id_generator):
        class StrictRecording(RecordingModel, StrictNote):
            pass

        model = StrictRecording({"id": "7", "title": "Draft"}, id_generator=id_generator, response={"title": ""})

        model.load()

        assert model.get("title") == "Draft"
