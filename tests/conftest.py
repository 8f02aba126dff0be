"""Shared fixtures: an in-memory stand-in for the Supabase client."""

import itertools
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from supabase import AuthError

from notecycle.config import Settings
from notecycle.controller import NoteCycle
from notecycle.main import create_app
from notecycle.schemas import PdfFile, UploadForm

SAMPLE_PDF = b"%PDF-1.4\n1 0 obj\n<<>>\nendobj\ntrailer\n<<>>\n%%EOF\n"


class FakeAuthError(AuthError):
    def __init__(self, message):
        Exception.__init__(self, message)
        self.message = message


class FakeSubscription:
    def __init__(self, auth, callback):
        self.auth = auth
        self.callback = callback

    def unsubscribe(self):
        if self in self.auth.subscriptions:
            self.auth.subscriptions.remove(self)


def make_session(user_id, email):
    return SimpleNamespace(user=SimpleNamespace(id=user_id, email=email))


class FakeAuth:
    def __init__(self, backend):
        self.backend = backend
        self.session = None
        self.subscriptions = []

    def get_session(self):
        self.backend.record("get_session")
        self.backend.maybe_fail("get_session")
        return self.session

    def on_auth_state_change(self, callback):
        subscription = FakeSubscription(self, callback)
        self.subscriptions.append(subscription)
        return subscription

    def emit(self, event, session):
        self.session = session
        for subscription in list(self.subscriptions):
            subscription.callback(event, session)

    def sign_up(self, credentials):
        self.backend.record("sign_up")
        email = credentials["email"]
        if email in self.backend.store.accounts:
            raise FakeAuthError("User already registered")
        user_id = f"u{len(self.backend.store.accounts) + 1}"
        self.backend.store.accounts[email] = (user_id, credentials["password"])
        session = make_session(user_id, email)
        self.emit("SIGNED_IN", session)
        return SimpleNamespace(user=session.user, session=session)

    def sign_in_with_password(self, credentials):
        self.backend.record("sign_in_with_password")
        account = self.backend.store.accounts.get(credentials["email"])
        if account is None or account[1] != credentials["password"]:
            raise FakeAuthError("Invalid login credentials")
        session = make_session(account[0], credentials["email"])
        self.emit("SIGNED_IN", session)
        return SimpleNamespace(user=session.user, session=session)

    def sign_out(self):
        self.backend.record("sign_out")
        self.emit("SIGNED_OUT", None)


class FakeQuery:
    def __init__(self, backend, table):
        self.backend = backend
        self.table = table
        self.action = None
        self.payload = None
        self.filters = []
        self.descending = None

    def select(self, columns="*"):
        self.action = "select"
        return self

    def order(self, column, desc=False):
        self.descending = desc
        return self

    def insert(self, data):
        self.action = "insert"
        self.payload = data
        return self

    def delete(self):
        self.action = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def _matches(self, row):
        return all(str(row.get(column)) == str(value) for column, value in self.filters)

    def execute(self):
        backend = self.backend
        backend.record(f"{self.action}:{self.table}")
        backend.maybe_fail(self.action)
        rows = backend.tables.setdefault(self.table, [])

        if self.action == "select":
            data = [dict(row) for row in rows if self._matches(row)]
            data.sort(key=lambda row: row["created_at"], reverse=bool(self.descending))
            return SimpleNamespace(data=data)

        if self.action == "insert":
            row = dict(self.payload)
            tick = next(backend.clock)
            row["id"] = tick
            row["created_at"] = f"2026-01-01T00:00:{tick:02d}+00:00"
            rows.append(row)
            return SimpleNamespace(data=[dict(row)])

        removed = [row for row in rows if self._matches(row)]
        backend.tables[self.table] = [row for row in rows if not self._matches(row)]
        return SimpleNamespace(data=removed)


class FakeBucket:
    def __init__(self, backend, name):
        self.backend = backend
        self.name = name

    @property
    def objects(self):
        return self.backend.buckets.setdefault(self.name, {})

    def upload(self, path, file, file_options=None):
        self.backend.record("upload")
        self.backend.maybe_fail("upload")
        if path in self.objects:
            raise Exception("The resource already exists")
        self.objects[path] = (file, dict(file_options or {}))
        return SimpleNamespace(path=path)

    def get_public_url(self, path):
        return f"https://example.supabase.co/storage/v1/object/public/{self.name}/{path}"

    def remove(self, paths):
        self.backend.record("remove")
        self.backend.maybe_fail("remove")
        for path in paths:
            self.objects.pop(path, None)
        return []

    def download(self, path):
        if path not in self.objects:
            raise Exception("Object not found")
        return self.objects[path][0]


class FakeStorage:
    def __init__(self, backend):
        self.backend = backend

    def from_(self, bucket):
        return FakeBucket(self.backend, bucket)


class FakeStore:
    """Tables, buckets and accounts shared by every client of one fake project."""

    def __init__(self):
        self.calls = []
        self.fail = {}
        self.tables = {}
        self.buckets = {}
        self.accounts = {}
        self.clock = itertools.count(1)


class FakeSupabase:
    """Records every backend call; ``fail[name]`` makes that call raise."""

    def __init__(self, store=None):
        self.store = store or FakeStore()
        self.auth = FakeAuth(self)
        self.storage = FakeStorage(self)

    calls = property(lambda self: self.store.calls)
    fail = property(lambda self: self.store.fail)
    tables = property(lambda self: self.store.tables)
    buckets = property(lambda self: self.store.buckets)
    clock = property(lambda self: self.store.clock)

    def table(self, name):
        return FakeQuery(self, name)

    def record(self, name):
        self.calls.append(name)

    def maybe_fail(self, name):
        error = self.fail.get(name)
        if error is not None:
            raise error

    def sign_in_as(self, user_id, email):
        self.store.accounts[email] = (user_id, "secret123")
        self.auth.emit("SIGNED_IN", make_session(user_id, email))

    def add_note(self, **fields):
        tick = next(self.clock)
        row = {
            "id": tick,
            "title": "Notes",
            "description": "",
            "course": "BIS 2A",
            "major": "Biology",
            "file_path": f"Biology/BIS 2A/{tick}_seed.pdf",
            "file_url": f"https://example.supabase.co/storage/v1/object/public/notes-pdfs/Biology/BIS 2A/{tick}_seed.pdf",
            "user_id": "u9",
            "user_email": "other@x.edu",
            "created_at": f"2026-01-01T00:00:{tick:02d}+00:00",
        }
        row.update(fields)
        self.tables.setdefault("notes", []).append(row)
        self.buckets.setdefault("notes-pdfs", {})[row["file_path"]] = (SAMPLE_PDF, {})
        return row


def pdf_file(name="sample.pdf", content_type="application/pdf", data=SAMPLE_PDF):
    return PdfFile(filename=name, content_type=content_type, data=data)


def valid_form(**overrides):
    fields = {
        "title": "Midterm 1",
        "description": "Week 1-5 review",
        "course": "ECS 36A",
        "major": "Computer Science & Engineering",
        "file": pdf_file(),
    }
    fields.update(overrides)
    return UploadForm(**fields)


@pytest.fixture
def fake_db():
    return FakeSupabase()


@pytest.fixture
def settings():
    return Settings(
        env={"SUPABASE_URL": "https://example.supabase.co", "SUPABASE_KEY": "anon", "NOTECYCLE_MAX_SESSIONS": "3"}
    )


@pytest.fixture
def notecycle(fake_db, settings):
    app = NoteCycle(fake_db, settings)
    app.start()
    yield app
    app.close()


@pytest.fixture
def client(fake_db, settings):
    with TestClient(create_app(client_factory=lambda: FakeSupabase(fake_db.store), settings=settings)) as test_client:
        yield test_client
