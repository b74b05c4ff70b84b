"""SQLite database operations for family tree storage."""

from datetime import datetime, timedelta, timezone
import json
from pathlib import Path
import re
import secrets
import sqlite3
import string
import uuid

from models import DEFAULT_THEME, FamilyTree, Person, Share, person_from_dict, person_to_dict

SHARE_ID_ALPHABET = string.ascii_lowercase + string.digits


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def create_database(db_path: Path | str) -> sqlite3.Connection:
    """Create SQLite database with family tree, person and share tables."""
    conn = sqlite3.connect(db_path)
    conn.execute("PRAGMA foreign_keys = ON")
    cursor = conn.cursor()

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS family_tree (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            slug TEXT NOT NULL UNIQUE,
            theme TEXT NOT NULL,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS person (
            tree_id TEXT NOT NULL,
            id TEXT NOT NULL,
            position INTEGER NOT NULL,
            name TEXT NOT NULL,
            relation TEXT,
            gender TEXT,
            generation INTEGER NOT NULL,
            parent_id TEXT,
            spouse_id TEXT,
            profile TEXT NOT NULL,
            PRIMARY KEY (tree_id, id),
            FOREIGN KEY (tree_id) REFERENCES family_tree(id) ON DELETE CASCADE
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS share (
            share_id TEXT PRIMARY KEY,
            tree_id TEXT NOT NULL,
            is_active INTEGER NOT NULL DEFAULT 1,
            created_at TEXT NOT NULL,
            expires_at TEXT,
            FOREIGN KEY (tree_id) REFERENCES family_tree(id) ON DELETE CASCADE
        )
    """)

    conn.commit()
    return conn


def slugify(name: str) -> str:
    """Lower-case the name, turn whitespace into dashes, drop everything else."""
    slug = re.sub(r"\s+", "-", name.strip().lower())
    return re.sub(r"[^a-z0-9-]", "", slug)


def _tree_from_row(row) -> FamilyTree:
    return FamilyTree(
        id=row[0],
        name=row[1],
        slug=row[2],
        theme=row[3],
        created_at=row[4],
        updated_at=row[5],
        member_count=row[6],
    )


_TREE_QUERY = """
    SELECT t.id, t.name, t.slug, t.theme, t.created_at, t.updated_at,
           (SELECT COUNT(*) FROM person p WHERE p.tree_id = t.id)
    FROM family_tree t
"""


def create_tree(conn: sqlite3.Connection, name: str, theme: str = DEFAULT_THEME) -> FamilyTree:
    """Insert a new tree with a unique slug derived from its name."""
    name = name.strip()
    if not name:
        raise ValueError("Name is required")

    base_slug = slugify(name)
    slug = base_slug or f"tree-{int(datetime.now().timestamp() * 1000)}"
    counter = 1
    cursor = conn.cursor()
    while cursor.execute("SELECT 1 FROM family_tree WHERE slug = ?", (slug,)).fetchone():
        slug = f"{base_slug or 'tree'}-{counter}"
        counter += 1

    now = _now()
    tree = FamilyTree(
        id=uuid.uuid4().hex, name=name, slug=slug, theme=theme, created_at=now, updated_at=now
    )
    cursor.execute(
        "INSERT INTO family_tree (id, name, slug, theme, created_at, updated_at) VALUES (?, ?, ?, ?, ?, ?)",
        (tree.id, tree.name, tree.slug, tree.theme, tree.created_at, tree.updated_at),
    )
    conn.commit()
    return tree


def list_trees(conn: sqlite3.Connection) -> list[FamilyTree]:
    """All trees, most recently updated first."""
    rows = conn.execute(_TREE_QUERY + " ORDER BY t.updated_at DESC, t.rowid DESC").fetchall()
    return [_tree_from_row(row) for row in rows]


def get_tree(conn: sqlite3.Connection, tree_id: str) -> FamilyTree:
    row = conn.execute(_TREE_QUERY + " WHERE t.id = ?", (tree_id,)).fetchone()
    if row is None:
        raise LookupError(f"Tree {tree_id} not found")
    return _tree_from_row(row)


def delete_tree(conn: sqlite3.Connection, tree_id: str):
    """Delete a tree together with its persons and shares."""
    get_tree(conn, tree_id)
    conn.execute("DELETE FROM share WHERE tree_id = ?", (tree_id,))
    conn.execute("DELETE FROM person WHERE tree_id = ?", (tree_id,))
    conn.execute("DELETE FROM family_tree WHERE id = ?", (tree_id,))
    conn.commit()


def store_people(conn: sqlite3.Connection, tree_id: str, persons: list[Person]):
    """Insert or replace persons of a tree, keeping their list order."""
    get_tree(conn, tree_id)
    cursor = conn.cursor()
    start = cursor.execute(
        "SELECT COALESCE(MAX(position), -1) + 1 FROM person WHERE tree_id = ?", (tree_id,)
    ).fetchone()[0]

    cursor.executemany(
        """
        INSERT INTO person
        (tree_id, id, position, name, relation, gender, generation, parent_id, spouse_id, profile)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT (tree_id, id) DO UPDATE SET
            name = excluded.name,
            relation = excluded.relation,
            gender = excluded.gender,
            generation = excluded.generation,
            parent_id = excluded.parent_id,
            spouse_id = excluded.spouse_id,
            profile = excluded.profile
        """,
        [
            (
                tree_id,
                p.id,
                start + i,
                p.name,
                p.relation,
                p.gender,
                p.generation,
                p.parent_id,
                p.spouse_id,
                json.dumps(person_to_dict(p)),
            )
            for i, p in enumerate(persons)
        ],
    )
    cursor.execute("UPDATE family_tree SET updated_at = ? WHERE id = ?", (_now(), tree_id))
    conn.commit()


def load_people(conn: sqlite3.Connection, tree_id: str) -> list[Person]:
    """Persons of a tree in the order they were first stored."""
    get_tree(conn, tree_id)
    rows = conn.execute(
        "SELECT profile FROM person WHERE tree_id = ? ORDER BY position", (tree_id,)
    ).fetchall()
    return [person_from_dict(json.loads(row[0])) for row in rows]


def delete_person(conn: sqlite3.Connection, tree_id: str, person_id: str):
    cursor = conn.execute(
        "DELETE FROM person WHERE tree_id = ? AND id = ?", (tree_id, person_id)
    )
    if cursor.rowcount == 0:
        raise LookupError(f"Person {person_id} not found in tree {tree_id}")
    conn.execute("UPDATE family_tree SET updated_at = ? WHERE id = ?", (_now(), tree_id))
    conn.commit()


def create_share(
    conn: sqlite3.Connection, tree_id: str, expires_in_days: float | None = None
) -> Share:
    """Create a read-only share link id of the form `<slug>-<8 random chars>`."""
    tree = get_tree(conn, tree_id)
    suffix = "".join(secrets.choice(SHARE_ID_ALPHABET) for _ in range(8))
    now = datetime.now(timezone.utc)
    expires_at = None
    if expires_in_days is not None and expires_in_days > 0:
        expires_at = (now + timedelta(days=expires_in_days)).isoformat()

    share = Share(
        share_id=f"{tree.slug or 'tree'}-{suffix}",
        tree_id=tree.id,
        is_active=True,
        created_at=now.isoformat(),
        expires_at=expires_at,
    )
    conn.execute(
        "INSERT INTO share (share_id, tree_id, is_active, created_at, expires_at) VALUES (?, ?, ?, ?, ?)",
        (share.share_id, share.tree_id, 1, share.created_at, share.expires_at),
    )
    conn.commit()
    return share


def deactivate_share(conn: sqlite3.Connection, share_id: str):
    cursor = conn.execute("UPDATE share SET is_active = 0 WHERE share_id = ?", (share_id,))
    if cursor.rowcount == 0:
        raise LookupError(f"Share {share_id} not found")
    conn.commit()


def load_shared_people(
    conn: sqlite3.Connection, share_id: str, now: datetime | None = None
) -> tuple[FamilyTree, list[Person]]:
    """Resolve a share link to its tree; inactive or expired links are not found."""
    row = conn.execute(
        "SELECT tree_id, is_active, expires_at FROM share WHERE share_id = ?", (share_id,)
    ).fetchone()
    if row is None:
        raise LookupError(f"Share {share_id} not found")

    tree_id, is_active, expires_at = row
    # Naive times are taken as local time
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    if not is_active or (expires_at and datetime.fromisoformat(expires_at) < now):
        raise LookupError(f"Share {share_id} is no longer active")

    return get_tree(conn, tree_id), load_people(conn, tree_id)
