"""Shared fixtures: an in-memory stand-in for the supabase Client."""
from types import SimpleNamespace

import pytest

from src.auth import SessionContext
from src.database import DatabaseClient


class FakeResponse:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    def __init__(self, store, table):
        self.store = store
        self.table_name = table
        self.filters = []
        self.order_key = None
        self.order_desc = False
        self.row_limit = None
        self.want_single = False
        self.want_count = False
        self.columns = None
        self.pending_insert = None

    def select(self, *columns, count=None):
        self.columns = columns
        self.want_count = count == "exact"
        return self

    def eq(self, key, value):
        self.filters.append((key, value))
        return self

    def order(self, key, desc=False):
        self.order_key = key
        self.order_desc = desc
        return self

    def limit(self, n):
        self.row_limit = n
        return self

    def single(self):
        self.want_single = True
        return self

    def insert(self, row):
        self.pending_insert = row
        return self

    def execute(self):
        self.store.calls.append((self.table_name, self))
        error = self.store.errors.get(self.table_name)
        if error is not None:
            raise error
        rows = self.store.tables.setdefault(self.table_name, [])
        if self.pending_insert is not None:
            rows.append(dict(self.pending_insert))
            return FakeResponse([self.pending_insert])

        out = [r for r in rows if all(r.get(k) == v for k, v in self.filters)]
        count = len(out)
        if self.order_key:
            out = sorted(out, key=lambda r: r.get(self.order_key), reverse=self.order_desc)
        if self.row_limit is not None:
            out = out[: self.row_limit]
        if self.want_single:
            if len(out) != 1:
                raise RuntimeError("JSON object requested, multiple (or no) rows returned")
            return FakeResponse(out[0])
        return FakeResponse(out, count if self.want_count else None)


class FakeAuth:
    def __init__(self):
        self.session = None
        self.users = {}

    def get_session(self):
        return self.session

    def sign_in_with_password(self, credentials):
        user_id = self.users.get((credentials["email"], credentials["password"]))
        if user_id is None:
            raise RuntimeError("Invalid login credentials")
        user = SimpleNamespace(id=user_id, email=credentials["email"])
        self.session = SimpleNamespace(user=user)
        return SimpleNamespace(session=self.session, user=user)

    def sign_out(self):
        self.session = None


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.errors = {}
        self.calls = []
        self.auth = FakeAuth()

    def table(self, name):
        return FakeQuery(self, name)

    def inserts(self, table):
        return [q.pending_insert for t, q in self.calls if t == table and q.pending_insert is not None]


def make_question_row(n, domain="aptitude", correct="A"):
    return {
        "id": f"q{n}",
        "question_text": f"Question {n}?",
        "option_a": "one",
        "option_b": "two",
        "option_c": "three",
        "option_d": "four",
        "correct_answer": correct,
        "explanation": f"Because {n}.",
        "domain": domain,
        "sub_topic": "percentages",
    }


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def db(fake_supabase):
    return DatabaseClient(fake_supabase)


@pytest.fixture
def ctx():
    return SessionContext(user_id="user-1", email="learner@example.com")
