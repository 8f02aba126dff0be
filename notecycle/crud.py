from typing import List, Union

from supabase import Client

NOTES_TABLE = "notes"


def create_note(db: Client, note_data: dict, table: str = NOTES_TABLE):
    """Create a new note in Supabase."""
    result = db.table(table).insert(note_data).execute()
    return result.data[0] if result.data else None


def get_all_notes(db: Client, table: str = NOTES_TABLE) -> List[dict]:
    """Get all notes from Supabase, newest first."""
    result = db.table(table).select("*").order("created_at", desc=True).execute()
    return result.data or []


def delete_note(db: Client, note_id: Union[int, str], table: str = NOTES_TABLE):
    """Delete a single note record by id."""
    result = db.table(table).delete().eq("id", note_id).execute()
    return result.data
