"""
Homonym group commands.
"""

import sys

from homonyms.cli.backend import get_backend
from homonyms.cli.commands.collection import print_group


def add_subparser(subparsers):
    parser = subparsers.add_parser("homonym", help="Homonym groups in a collection")
    hom_sub = parser.add_subparsers(dest="homonym_command", required=True)

    # list
    list_p = hom_sub.add_parser("list", help="List homonym groups in a collection")
    list_p.add_argument("collection_id", help="Collection ID")
    list_p.set_defaults(func=homonym_list)

    # add
    add_p = hom_sub.add_parser("add", help="Add a homonym group, looking up definitions")
    add_p.add_argument("collection_id", help="Collection ID")
    add_p.add_argument("words", nargs="+", help="Two or more words that sound alike")
    add_p.add_argument("--pronunciation", help="Pronunciation (default: looked up from the first word)")
    add_p.set_defaults(func=homonym_add)

    # update
    update_p = hom_sub.add_parser("update", help="Replace a group's words, looking up definitions")
    update_p.add_argument("group_id", help="Homonym group ID")
    update_p.add_argument("words", nargs="+", help="Two or more words that sound alike")
    update_p.add_argument("--pronunciation", help="Pronunciation (default: keep the current one)")
    update_p.set_defaults(func=homonym_update)

    # search
    search_p = hom_sub.add_parser("search", help="Search spellings and definitions")
    search_p.add_argument("collection_id", help="Collection ID")
    search_p.add_argument("term", help="Search term")
    search_p.set_defaults(func=homonym_search)

    # show
    show_p = hom_sub.add_parser("show", help="Show a homonym group")
    show_p.add_argument("group_id", help="Homonym group ID")
    show_p.set_defaults(func=homonym_show)

    # delete
    delete_p = hom_sub.add_parser("delete", help="Delete a homonym group")
    delete_p.add_argument("group_id", help="Homonym group ID")
    delete_p.set_defaults(func=homonym_delete)


def homonym_list(args):
    try:
        groups = get_backend(args).list_homonyms(args.collection_id)
        if not groups:
            print("No homonyms.")
            return
        for g in groups:
            print_group(g)
    except Exception as e:
        print(f"✗ Error: {e}")
        sys.exit(1)


def homonym_add(args):
    try:
        backend = get_backend(args)
        words = []
        for word in args.words:
            definition = backend.get_definition(word)
            print(f"  {word:12} {definition}")
            words.append({"word": word, "definition": definition})

        pronunciation = args.pronunciation or backend.get_pronunciation(args.words[0])
        group = backend.create_homonym_group(args.collection_id, pronunciation, words)
        print(f"✓ Added group: {group['id']}  {group['pronunciation']}")
    except Exception as e:
        print(f"✗ Error: {e}")
        sys.exit(1)


def homonym_update(args):
    try:
        backend = get_backend(args)
        current = backend.get_homonym_group(args.group_id)
        words = []
        for word in args.words:
            definition = backend.get_definition(word)
            print(f"  {word:12} {definition}")
            words.append({"word": word, "definition": definition})

        pronunciation = args.pronunciation or current["pronunciation"]
        group = backend.update_homonym_group(args.group_id, pronunciation, words)
        print(f"✓ Updated group: {group['id']}  {group['pronunciation']}")
    except Exception as e:
        print(f"✗ Error: {e}")
        sys.exit(1)


def homonym_search(args):
    try:
        groups = get_backend(args).search_homonyms(args.collection_id, args.term)
        if not groups:
            print(f'No homonyms match "{args.term}".')
            return
        for g in groups:
            print_group(g)
    except Exception as e:
        print(f"✗ Error: {e}")
        sys.exit(1)


def homonym_show(args):
    try:
        print_group(get_backend(args).get_homonym_group(args.group_id))
    except Exception as e:
        print(f"✗ Error: {e}")
        sys.exit(1)


def homonym_delete(args):
    try:
        get_backend(args).delete_homonym_group(args.group_id)
        print(f"✓ Deleted group: {args.group_id}")
    except Exception as e:
        print(f"✗ Error: {e}")
        sys.exit(1)
