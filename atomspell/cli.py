"""
AtomSpell command line.

    atomspell check notes.txt -l eng --suggest
    atomspell check notes.txt -l auto --default eng --json
    atomspell check main.py --code
    echo "Helo wrold" | atomspell stdin -l eng --suggest
    atomspell frequency notes.txt --top 20
    atomspell create-dict corpus.txt "dictionary(xyz).txt" --min-length 2
    atomspell languages

Exit status: 0 no misspellings, 1 misspellings found, 2 error.
"""

import argparse
import copy
import json
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from . import __version__
from .config_logging import (
    AtomSpellError,
    DictionaryFileError,
    LogConfig,
    configure_logging,
    get_logger,
    handle_errors,
)
from .base import CheckReport
from .config import get_config
from .engine import SpellEngine
from .files import BUNDLED_DICT_DIR, import_custom_words, load_dictionaries
from .languages import is_auto_detect
from .stats import build_word_list, document_stats, most_common_words, word_frequency

_logger = get_logger('cli')

EXIT_OK = 0
EXIT_MISSPELLED = 1
EXIT_ERROR = 2


@handle_errors()
def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding='utf-8')
    except UnicodeDecodeError as e:
        raise DictionaryFileError(f"Input is not valid UTF-8: {path}", filename=str(path)) from e


def _build_engine(args) -> SpellEngine:
    config = get_config()
    if getattr(args, 'code', False):
        config = copy.deepcopy(config)
        config.lookup.code_aware = True
    engine = SpellEngine(config=config)
    dirs = [Path(d) for d in (args.dict_dir or [])] + [BUNDLED_DICT_DIR]
    loaded = load_dictionaries(engine.store, dirs)
    _logger.debug("Dictionaries loaded", languages=loaded)

    for custom in getattr(args, 'custom', None) or []:
        if is_auto_detect(args.language):
            targets = engine.loaded_languages()
        else:
            targets = [engine.store.resolve(args.language)]
        for language in targets:
            import_custom_words(engine.store, language, custom)
    return engine


def _print_report(report: CheckReport, text: str, args) -> None:
    if args.json:
        data = report.to_dict()
        if getattr(args, 'stats', False):
            data['stats'] = document_stats(text)
        if not args.suggest:
            for item in data['misspellings']:
                item.pop('suggestions', None)
        print(json.dumps(data, indent=2, ensure_ascii=False))
        return

    source = "detected" if report.detected else "selected"
    print(f"Language: {report.language.name} ({report.language.code}, {source})")
    if not report.dictionary_loaded:
        print(f"No dictionary loaded for {report.language.name}; nothing was checked.")
    if report.likely_code:
        print(f"Checked as source code ({report.file_type or 'detected'})")
    for m in report.misspellings:
        line = f"{m.line}:{m.column}: {m.word}"
        if args.suggest:
            words = ", ".join(s.word for s in m.suggestions)
            line += f" -> {words}" if words else " (no suggestions)"
        print(line)

    if report.is_clean and report.dictionary_loaded:
        print("All words are well spelled!")
    else:
        print(f"{report.misspelled_count} misspelled of {report.word_count} words")

    if getattr(args, 'stats', False):
        stats = document_stats(text)
        reading = stats['reading_time']
        print(f"Accuracy: {report.accuracy:.0f}%")
        print(f"Lines: {report.lines_checked}  Unique words: {stats['unique_words']}")
        print(f"Reading time: {reading['minutes']}m {reading['seconds']}s")
        top = most_common_words(word_frequency(text), 5)
        if top:
            print("Top words: " + ", ".join(f"{w} ({c})" for w, c in top))


def _run_check(args, text: str, filename: Optional[str] = None) -> int:
    engine = _build_engine(args)
    report = engine.check(text, args.language, default_language=args.default,
                          filename=filename)
    _print_report(report, text, args)
    return EXIT_MISSPELLED if report.misspellings else EXIT_OK


def cmd_check(args) -> int:
    return _run_check(args, _read_text(Path(args.file)), filename=args.file)


def cmd_stdin(args) -> int:
    return _run_check(args, sys.stdin.read())


def cmd_frequency(args) -> int:
    text = _read_text(Path(args.file))
    top = most_common_words(word_frequency(text), args.top)
    if args.json:
        print(json.dumps([{'word': w, 'count': c} for w, c in top], indent=2,
                         ensure_ascii=False))
    else:
        width = max((len(w) for w, _ in top), default=0)
        for word, count in top:
            print(f"{word:<{width}}  {count}")
    return EXIT_OK


@handle_errors()
def cmd_create_dict(args) -> int:
    text = _read_text(Path(args.input))
    entries = build_word_list(text, min_length=args.min_length)
    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    with open(output, 'w', encoding='utf-8') as f:
        for word, count in entries:
            f.write(f"{word}\t{count}\n" if args.with_counts else f"{word}\n")
    print(f"Wrote {len(entries)} words to {output}")
    return EXIT_OK


def cmd_languages(args) -> int:
    engine = _build_engine(args)
    loaded = {language.code for language in engine.loaded_languages()}
    rows = [
        {
            'code': language.code,
            'name': language.name,
            'aliases': list(language.aliases),
            'loaded': language.code in loaded,
            'words': engine.store.word_count(language),
        }
        for language in engine.languages()
    ]
    if args.json:
        print(json.dumps(rows, indent=2, ensure_ascii=False))
    else:
        for row in rows:
            mark = "*" if row['loaded'] else " "
            print(f"{mark} {row['code']}  {row['name']:<12} {row['words']} words")
    return EXIT_OK


def _add_check_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('-l', '--language', default='eng',
                        help="Language code (eng, fra, ...) or 'auto' (default: eng)")
    parser.add_argument('-d', '--default', default=None,
                        help="Fallback language when auto-detection has too little text")
    parser.add_argument('-s', '--suggest', action='store_true', help="Show suggestions")
    parser.add_argument('--json', action='store_true', help="Output JSON")
    parser.add_argument('--custom', action='append', metavar='FILE',
                        help="Custom word file to import (repeatable)")
    parser.add_argument('--code', action='store_true',
                        help="Skip code identifiers and common acronyms in source code")


def _add_dict_dir_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--dict-dir', action='append', metavar='DIR',
                        help="Extra directory with dictionary(<code>).txt files (repeatable)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='atomspell', description='Command-line spell checker')
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help="Log to stderr (-v info, -vv debug)")
    sub = parser.add_subparsers(dest='command', required=True)

    check = sub.add_parser('check', help='Check spelling in a file')
    check.add_argument('file')
    _add_check_options(check)
    _add_dict_dir_option(check)
    check.add_argument('--stats', action='store_true', help="Show statistics")
    check.set_defaults(func=cmd_check)

    stdin = sub.add_parser('stdin', help='Check spelling of standard input')
    _add_check_options(stdin)
    _add_dict_dir_option(stdin)
    stdin.add_argument('--stats', action='store_true', help="Show statistics")
    stdin.set_defaults(func=cmd_stdin)

    frequency = sub.add_parser('frequency', help='Analyze word frequency')
    frequency.add_argument('file')
    frequency.add_argument('-t', '--top', type=int, default=10, help="Number of top words")
    frequency.add_argument('--json', action='store_true', help="Output JSON")
    frequency.set_defaults(func=cmd_frequency)

    create = sub.add_parser('create-dict', help='Create a dictionary from a text file')
    create.add_argument('input')
    create.add_argument('output')
    create.add_argument('-m', '--min-length', type=int, default=2, help="Minimum word length")
    create.add_argument('--no-counts', dest='with_counts', action='store_false',
                        help="Write bare words without the frequency column")
    create.set_defaults(func=cmd_create_dict)

    languages = sub.add_parser('languages', help='List languages and loaded dictionaries')
    _add_dict_dir_option(languages)
    languages.add_argument('--json', action='store_true', help="Output JSON")
    languages.set_defaults(func=cmd_languages)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    log_config = LogConfig.from_env()
    if args.verbose:
        log_config.level = 'DEBUG' if args.verbose > 1 else 'INFO'
    configure_logging(log_config)

    try:
        return args.func(args)
    except AtomSpellError as e:
        print(f"error: {e.message}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == '__main__':
    sys.exit(main())
