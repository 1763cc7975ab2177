"""Supabase client setup. Client is kept in Streamlit session state."""
import logging
import os

import streamlit as st
from dotenv import load_dotenv
from supabase import Client, ClientOptions, create_client

from engine import SUPABASE_TIMEOUT_SECONDS

load_dotenv()

logger = logging.getLogger(__name__)


def _timeout_seconds() -> float:
    raw = os.environ.get("SUPABASE_TIMEOUT_SECONDS")
    if not raw:
        return SUPABASE_TIMEOUT_SECONDS
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid SUPABASE_TIMEOUT_SECONDS=%r", raw)
        return SUPABASE_TIMEOUT_SECONDS


def _env_client() -> Client:
    url = os.environ.get("SUPABASE_URL")
    key = os.environ.get("SUPABASE_KEY")
    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set")
    options = ClientOptions(postgrest_client_timeout=_timeout_seconds())
    return create_client(url, key, options=options)


def get_supabase() -> Client:
    """One client per browser session: the auth session lives on the client."""
    if "supabase_client" not in st.session_state:
        st.session_state["supabase_client"] = _env_client()
    return st.session_state["supabase_client"]


def get_supabase_uncached() -> Client:
    """For CLI/scripts (no Streamlit context)."""
    return _env_client()


def upsert_questions_bulk(client: Client, rows: list[dict], chunk_size: int = 200):
    """Bulk upsert into questions. Dedupes by id so no chunk has duplicates (avoids Postgres ON CONFLICT error)."""
    n_before = len(rows)
    by_id = {r["id"]: r for r in rows}
    rows = list(by_id.values())
    if len(rows) < n_before:
        logger.info("Deduped questions by id: %d -> %d", n_before, len(rows))
    n_chunks = (len(rows) + chunk_size - 1) // chunk_size
    for i in range(0, len(rows), chunk_size):
        chunk = rows[i : i + chunk_size]
        chunk_num = i // chunk_size + 1
        logger.info("Upserting chunk %d/%d (%d rows)", chunk_num, n_chunks, len(chunk))
        client.table("questions").upsert(chunk, on_conflict="id").execute()


def delete_questions_by_source(client: Client, source: str):
    """Delete all questions with the given source (e.g. 'aptitude_pack')."""
    client.table("questions").delete().eq("source", source).execute()
