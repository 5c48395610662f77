#!/usr/bin/env python3
"""
Novel Studio CLI - command line entry
"""
import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv
from prompt_toolkit.shortcuts import confirm

from novel_studio.config import config
from novel_studio.errors import NovelStudioError
from novel_studio.logging_config import setup_logging
from novel_studio.main import NovelStudio
from novel_studio.schema import CharacterRole, PlotPointType
from novel_studio.stats import chapter_word_count

logger = logging.getLogger(__name__)


def _open(args) -> NovelStudio:
    return NovelStudio.open(args.data_dir)


def _read_content(args) -> Optional[str]:
    """Chapter text from --file, else --content (None when neither is given)."""
    if getattr(args, "file", None):
        with open(args.file, 'r', encoding='utf-8') as f:
            return f.read()
    return getattr(args, "content", None)


# ==================== Chapters ====================

def cmd_chapter(args):
    studio = _open(args)

    if args.action == "list":
        chapters = studio.store.list_chapters()
        if not chapters:
            print("No chapters yet. Add one with: novel-studio chapter add --title ...")
            return
        current = studio.get_current_chapter()
        for ch in chapters:
            marker = "*" if current is not None and ch.id == current.id else " "
            print(f"{marker} [{ch.number}] {ch.title}  ({chapter_word_count(ch)} words)  id={ch.id}")

    elif args.action == "add":
        chapter = studio.save_chapter_form(None, args.title, _read_content(args) or "", args.number)
        print(f"✅ Chapter saved: [{chapter.number}] {chapter.title}  id={chapter.id}")

    elif args.action == "edit":
        chapter = studio.save_chapter_form(args.id, args.title, _read_content(args), args.number)
        print(f"✅ Chapter updated: [{chapter.number}] {chapter.title}")

    elif args.action == "show":
        chapter = studio.store.get_chapter(args.id)
        if chapter is None:
            print(f"❌ Chapter not found: {args.id}")
            sys.exit(1)
        info = studio.editor_stats(chapter.content)
        print(f"📖 Chapter {chapter.number}: {chapter.title}")
        print(f"   {info.words} words | {info.characters} characters | {info.reading_minutes} min read")
        print("=" * 40)
        print(chapter.content)

    elif args.action == "open":
        if studio.store.get_chapter(args.id) is None:
            print(f"❌ Chapter not found: {args.id}")
            sys.exit(1)
        studio.set_current_chapter(args.id)
        print(f"📝 Current chapter: {studio.get_current_chapter().title}")

    elif args.action == "delete":
        if not args.yes and not confirm("Are you sure you want to delete this chapter?"):
            print("Cancelled")
            return
        reset_editor = studio.delete_chapter(args.id)
        print("🗑️ Chapter deleted")
        if reset_editor:
            print("   (it was the open chapter; the editor is now empty)")


# ==================== Characters ====================

def cmd_character(args):
    studio = _open(args)

    if args.action == "list":
        characters = studio.store.list_characters()
        if not characters:
            print("No characters yet.")
            return
        for c in characters:
            print(f"- {c.name} ({c.role or 'no role'})  id={c.id}")
            if c.bio:
                print(f"    {c.bio}")

    elif args.action == "add":
        character = studio.create_character(args.name, args.role, args.bio or "",
                                            args.traits or "", args.notes or "")
        print(f"✅ Character saved: {character.name}  id={character.id}")

    elif args.action == "edit":
        character = studio.update_character(args.id, name=args.name, role=args.role, bio=args.bio,
                                            traits=args.traits, notes=args.notes)
        print(f"✅ Character updated: {character.name}")

    elif args.action == "delete":
        if not args.yes and not confirm("Are you sure you want to delete this character?"):
            print("Cancelled")
            return
        studio.delete_character(args.id)
        print("🗑️ Character deleted")


# ==================== Plot points ====================

def cmd_plot(args):
    studio = _open(args)

    if args.action == "list":
        points = studio.store.list_plot_points()
        if not points:
            print("No plot points yet.")
            return
        for p in points:
            chapter = f"  (chapter: {p.chapter})" if p.chapter else ""
            print(f"- [{p.type_label}] {p.title}{chapter}  id={p.id}")

    elif args.action == "add":
        point = studio.create_plot_point(args.title, args.type, args.chapter or "", args.description or "")
        print(f"✅ Plot point saved: {point.title}  id={point.id}")

    elif args.action == "edit":
        point = studio.update_plot_point(args.id, title=args.title, type=args.type,
                                         chapter=args.chapter, description=args.description)
        print(f"✅ Plot point updated: {point.title}")

    elif args.action == "delete":
        if not args.yes and not confirm("Are you sure you want to delete this plot point?"):
            print("Cancelled")
            return
        studio.delete_plot_point(args.id)
        print("🗑️ Plot point deleted")


# ==================== Project ====================

def cmd_stats(args):
    studio = _open(args)
    info = studio.compute_stats()
    print(f"📚 Chapters: {info.chapter_count}")
    print(f"👤 Characters: {info.character_count}")
    print(f"🧭 Plot points: {info.plot_point_count}")
    print(f"📝 Total words: {info.total_words:,}")

    current = studio.get_current_chapter()
    if current is not None:
        editor = studio.editor_stats()
        print(f"\nOpen chapter: {current.title}")
        print(f"   {editor.words} words | {editor.characters} characters | {editor.reading_minutes} min read")


def cmd_settings(args):
    studio = _open(args)
    if args.font_size or args.font_family or args.line_height:
        studio.update_settings(args.font_size, args.font_family, args.line_height)
    s = studio.store.settings
    print(f"Font size: {s.font_size}px")
    print(f"Font family: {s.font_family}")
    print(f"Line height: {s.line_height}")


def cmd_export(args):
    studio = _open(args)
    path = studio.write_export(args.output)
    print(f"✅ Data exported: {path}")


def cmd_import(args):
    studio = _open(args)
    patch = studio.import_file(args.file)
    if patch.is_empty():
        print("⚠️ Nothing to import: the file has no chapters, characters, plotPoints or settings")
        return
    print(f"✅ Data imported ({', '.join(patch.touched_keys())})")


def cmd_clear(args):
    if not confirm("Are you sure you want to delete ALL data? This cannot be undone!"):
        print("Cancelled")
        return
    if not confirm("This will delete all chapters, characters, and plot points. Continue?"):
        print("Cancelled")
        return
    studio = _open(args)
    studio.clear_all()
    print("🧹 All data has been cleared")


def cmd_assist(args):
    studio = _open(args)
    content = None
    if args.chapter:
        chapter = studio.store.get_chapter(args.chapter)
        if chapter is None:
            print(f"❌ Chapter not found: {args.chapter}")
            sys.exit(1)
        content = chapter.content

    print("✨ Generating content...")
    suggestion = asyncio.run(studio.generate_suggestion(args.kind, args.prompt or "", content))
    print()
    print(suggestion)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="novel-studio",
        description="Novel Studio - chapters, characters and plot points for your novel",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  novel-studio chapter add --title "The Letter" --number 1 --file draft.txt
  novel-studio character add --name "Mara" --role protagonist
  novel-studio plot add --title "The fire" --type climax --chapter 12
  novel-studio stats
  novel-studio export --output backups
  novel-studio assist continue --prompt "she finds the key"
"""
    )
    parser.add_argument("-d", "--data-dir", default=config.data_dir, help="data directory")

    subparsers = parser.add_subparsers(dest="command")

    # chapter
    p_chapter = subparsers.add_parser("chapter", help="manage chapters")
    chapter_sub = p_chapter.add_subparsers(dest="action", required=True)
    chapter_sub.add_parser("list", help="list chapters by number")
    p = chapter_sub.add_parser("add", help="add a chapter")
    p.add_argument("--title", required=True)
    p.add_argument("--number", type=int, help="chapter number (default: next)")
    p.add_argument("--content", help="chapter text")
    p.add_argument("--file", help="read chapter text from a file")
    p = chapter_sub.add_parser("edit", help="edit a chapter")
    p.add_argument("id")
    p.add_argument("--title")
    p.add_argument("--number", type=int)
    p.add_argument("--content")
    p.add_argument("--file")
    for name, help_text in (("show", "print a chapter"), ("open", "make a chapter current")):
        p = chapter_sub.add_parser(name, help=help_text)
        p.add_argument("id")
    p = chapter_sub.add_parser("delete", help="delete a chapter")
    p.add_argument("id")
    p.add_argument("-y", "--yes", action="store_true", help="skip confirmation")
    p_chapter.set_defaults(func=cmd_chapter)

    # character
    p_character = subparsers.add_parser("character", help="manage characters")
    character_sub = p_character.add_subparsers(dest="action", required=True)
    character_sub.add_parser("list", help="list characters")
    roles = [r.value for r in CharacterRole]
    p = character_sub.add_parser("add", help="add a character")
    p.add_argument("--name", required=True)
    p.add_argument("--role", default=CharacterRole.SUPPORTING.value, help=f"one of {', '.join(roles)}")
    p.add_argument("--bio")
    p.add_argument("--traits")
    p.add_argument("--notes")
    p = character_sub.add_parser("edit", help="edit a character")
    p.add_argument("id")
    p.add_argument("--name")
    p.add_argument("--role")
    p.add_argument("--bio")
    p.add_argument("--traits")
    p.add_argument("--notes")
    p = character_sub.add_parser("delete", help="delete a character")
    p.add_argument("id")
    p.add_argument("-y", "--yes", action="store_true", help="skip confirmation")
    p_character.set_defaults(func=cmd_character)

    # plot
    p_plot = subparsers.add_parser("plot", help="manage plot points")
    plot_sub = p_plot.add_subparsers(dest="action", required=True)
    plot_sub.add_parser("list", help="list plot points in story order")
    types = [t.value for t in PlotPointType]
    p = plot_sub.add_parser("add", help="add a plot point")
    p.add_argument("--title", required=True)
    p.add_argument("--type", default=PlotPointType.EXPOSITION.value, help=f"one of {', '.join(types)}")
    p.add_argument("--chapter", help="related chapter (free text)")
    p.add_argument("--description")
    p = plot_sub.add_parser("edit", help="edit a plot point")
    p.add_argument("id")
    p.add_argument("--title")
    p.add_argument("--type")
    p.add_argument("--chapter")
    p.add_argument("--description")
    p = plot_sub.add_parser("delete", help="delete a plot point")
    p.add_argument("id")
    p.add_argument("-y", "--yes", action="store_true", help="skip confirmation")
    p_plot.set_defaults(func=cmd_plot)

    # stats
    p_stats = subparsers.add_parser("stats", help="show project statistics")
    p_stats.set_defaults(func=cmd_stats)

    # settings
    p_settings = subparsers.add_parser("settings", help="show or change editor settings")
    p_settings.add_argument("--font-size")
    p_settings.add_argument("--font-family")
    p_settings.add_argument("--line-height")
    p_settings.set_defaults(func=cmd_settings)

    # export / import / clear
    p_export = subparsers.add_parser("export", help="export all data as JSON")
    p_export.add_argument("--output", default=".", help="directory for the backup file")
    p_export.set_defaults(func=cmd_export)

    p_import = subparsers.add_parser("import", help="import a JSON backup")
    p_import.add_argument("file")
    p_import.set_defaults(func=cmd_import)

    p_clear = subparsers.add_parser("clear", help="delete ALL data")
    p_clear.set_defaults(func=cmd_clear)

    # assist
    p_assist = subparsers.add_parser("assist", help="ask the writing assistant")
    p_assist.add_argument("kind", help="continue, dialogue, description, plot-hole, rewrite, "
                                       "brainstorm, outline, conflict or ending")
    p_assist.add_argument("--prompt", help="what you want help with")
    p_assist.add_argument("--chapter", help="chapter id to use as context (default: open chapter)")
    p_assist.set_defaults(func=cmd_assist)

    return parser


def main(argv: Optional[List[str]] = None):
    load_dotenv()
    setup_logging()

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    try:
        args.func(args)
    except NovelStudioError as exc:
        print(f"❌ {exc}")
        sys.exit(1)
    except OSError as exc:
        logger.error("File operation failed: %s", exc)
        print(f"❌ {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
