"""
Word lookup commands.
"""

import sys

from homonyms.cli.backend import get_backend


def add_subparser(subparsers):
    parser = subparsers.add_parser("word", help="Dictionary lookups and homophone suggestions")
    word_sub = parser.add_subparsers(dest="word_command", required=True)

    # define
    define_p = word_sub.add_parser("define", help="Look up a definition")
    define_p.add_argument("word", help="Word")
    define_p.set_defaults(func=word_define)

    # pronounce
    pron_p = word_sub.add_parser("pronounce", help="Look up a pronunciation")
    pron_p.add_argument("word", help="Word")
    pron_p.set_defaults(func=word_pronounce)

    # suggest
    suggest_p = word_sub.add_parser("suggest", help="Suggest homophones with definitions")
    suggest_p.add_argument("word", help="Word")
    suggest_p.add_argument("--sort", action="store_true", help="Sort alphabetically")
    suggest_p.add_argument("--save", metavar="COLLECTION_ID", help="Save the suggestions as a group")
    suggest_p.add_argument("--pick", nargs="+", metavar="WORD", help="Only save these words")
    suggest_p.set_defaults(func=word_suggest)


def word_define(args):
    try:
        print(f"{args.word}: {get_backend(args).get_definition(args.word)}")
    except Exception as e:
        print(f"✗ Error: {e}")
        sys.exit(1)


def word_pronounce(args):
    try:
        print(f"{args.word}: {get_backend(args).get_pronunciation(args.word)}")
    except Exception as e:
        print(f"✗ Error: {e}")
        sys.exit(1)


def word_suggest(args):
    try:
        backend = get_backend(args)
        result = backend.get_suggestions(args.word, sort=args.sort)
        suggestions = result["suggestions"]

        for s in suggestions:
            if s["is_error"]:
                print(f"✗ {s['definition']}")
                continue
            marker = "*" if s["is_original"] else " "
            print(f"{marker} {s['word']:12} {s['pronunciation']:14} {s['definition']}")
        if result.get("notice"):
            print(result["notice"])

        if not args.save:
            return

        picked = {w.strip().lower() for w in args.pick} if args.pick else None
        selected = [
            s for s in suggestions
            if not s["is_error"] and (picked is None or s["word"].lower() in picked)
        ]
        words = [{"word": s["word"], "definition": s["definition"]} for s in selected]
        pronunciation = next((s["pronunciation"] for s in suggestions if s["is_original"]), "")
        group = backend.create_homonym_group(args.save, pronunciation, words)
        print(f"✓ Saved group: {group['id']} ({len(words)} words)")
    except Exception as e:
        print(f"✗ Error: {e}")
        sys.exit(1)
