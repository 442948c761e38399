"""
Collection commands.
"""

import json
import sys
from pathlib import Path

from rich import print_json

from homonyms.cli.backend import get_backend
from homonyms.core.models import utcnow
from homonyms.core.store import validate_group


EXPORT_VERSION = 1


def add_subparser(subparsers):
    parser = subparsers.add_parser("collection", help="Collection management")
    col_sub = parser.add_subparsers(dest="collection_command", required=True)

    # list
    list_p = col_sub.add_parser("list", help="List all collections")
    list_p.set_defaults(func=collection_list)

    # create
    create_p = col_sub.add_parser("create", help="Create a collection")
    create_p.add_argument("name", help="Collection name")
    create_p.set_defaults(func=collection_create)

    # show
    show_p = col_sub.add_parser("show", help="Show a collection and its homonyms")
    show_p.add_argument("collection_id", help="Collection ID")
    show_p.set_defaults(func=collection_show)

    # rename
    rename_p = col_sub.add_parser("rename", help="Rename a collection")
    rename_p.add_argument("collection_id", help="Collection ID")
    rename_p.add_argument("name", help="New name")
    rename_p.set_defaults(func=collection_rename)

    # delete
    delete_p = col_sub.add_parser("delete", help="Delete a collection and all its homonyms")
    delete_p.add_argument("collection_id", help="Collection ID")
    delete_p.set_defaults(func=collection_delete)

    # export
    export_p = col_sub.add_parser("export", help="Export a collection as JSON")
    export_p.add_argument("collection_id", help="Collection ID")
    export_p.add_argument("-o", "--output", help="Write to file instead of stdout")
    export_p.set_defaults(func=collection_export)

    # import
    import_p = col_sub.add_parser("import", help="Import a collection from an export file")
    import_p.add_argument("file", help="Path to .json export")
    import_p.add_argument("--name", help="Collection name (default: name in file)")
    import_p.set_defaults(func=collection_import)


def collection_list(args):
    try:
        collections = get_backend(args).list_collections()
        if not collections:
            print("No collections.")
            return
        for c in collections:
            print(f"{c['id']}  {c['name']:30} (created {c['created_at'][:10]})")
    except Exception as e:
        print(f"✗ Error: {e}")
        sys.exit(1)


def collection_create(args):
    try:
        result = get_backend(args).create_collection(args.name)
        print(f"✓ Created collection: {result['id']}")
        print(f"  name: {result['name']}")
    except Exception as e:
        print(f"✗ Error: {e}")
        sys.exit(1)


def collection_show(args):
    try:
        backend = get_backend(args)
        collection = backend.get_collection(args.collection_id)
        groups = backend.list_homonyms(args.collection_id)
        stats = collection.get("stats", {})
        print(f"ID: {collection['id']}")
        print(f"Name: {collection['name']}")
        print(f"Created: {collection['created_at']}")
        print(f"Updated: {collection['updated_at']}")
        print(f"Groups: {stats.get('total_groups', len(groups))}  Words: {stats.get('total_words', 0)}")
        print()
        for g in groups:
            print_group(g)
    except Exception as e:
        print(f"✗ Error: {e}")
        sys.exit(1)


def collection_rename(args):
    try:
        result = get_backend(args).rename_collection(args.collection_id, args.name)
        print(f"✓ Renamed {result['id']} to {result['name']}")
    except Exception as e:
        print(f"✗ Error: {e}")
        sys.exit(1)


def collection_delete(args):
    try:
        get_backend(args).delete_collection(args.collection_id)
        print(f"✓ Deleted collection: {args.collection_id}")
    except Exception as e:
        print(f"✗ Error: {e}")
        sys.exit(1)


def collection_export(args):
    try:
        backend = get_backend(args)
        collection = backend.get_collection(args.collection_id)
        collection.pop("stats", None)
        data = {
            "version": EXPORT_VERSION,
            "exported_at": utcnow(),
            "collection": collection,
            "homonyms": backend.list_homonyms(args.collection_id),
        }
        if args.output:
            Path(args.output).write_text(json.dumps(data, indent=2))
            print(f"✓ Exported {len(data['homonyms'])} groups to {args.output}")
        else:
            print_json(data=data)
    except Exception as e:
        print(f"✗ Error: {e}")
        sys.exit(1)


def collection_import(args):
    path = Path(args.file)
    if not path.exists():
        print(f"✗ File not found: {args.file}")
        sys.exit(1)

    try:
        data = json.loads(path.read_text())
        name = args.name or data["collection"]["name"]
        # check every group before anything is written
        groups = [validate_group(g.get("pronunciation"), g.get("words") or []) for g in data.get("homonyms", [])]

        backend = get_backend(args)
        collection = backend.create_collection(name)
        try:
            for pronunciation, words in groups:
                backend.create_homonym_group(
                    collection["id"], pronunciation, [{"word": w.word, "definition": w.definition} for w in words]
                )
        except Exception:
            backend.delete_collection(collection["id"])
            raise
        print(f"✓ Imported collection: {collection['id']}")
        print(f"  name: {collection['name']}")
        print(f"  groups: {len(groups)}")
    except Exception as e:
        print(f"✗ Error: {e}")
        sys.exit(1)


def print_group(g: dict):
    print(f"{g['id']}  {g['pronunciation']}")
    for w in g["words"]:
        print(f"    {w['word']:12} {w['definition']}")
