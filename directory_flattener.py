# FILE PATH: directory_flattener.py
# LOCATION: Root directory of your project
# DESCRIPTION: Main script for generating structure and flattened content reports from a folder

"""
Directory flattener: walks a folder and writes two Markdown reports.
1. STRUCTURE_<folder>_<timestamp>.md - tree listing plus a summary of included files
2. FLATTENED_<folder>_<timestamp>.md - every included file in a language-tagged fenced block

Exclusions:
- Entries from <root>/.gitignore (optional) merged with manual --exclude tokens
- .git is always excluded when .gitignore exclusions are enabled
- A pattern matches a whole path segment or basename anywhere in the tree.
  Globs, negation and anchoring are NOT interpreted.

Binary files are recognised by extension first, then by sniffing the first
bytes of the file, and are replaced with a one-line placeholder.
"""

import os
import sys
import argparse
import codecs
import dataclasses
import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, FrozenSet, Iterable, Iterator, List, Optional, Tuple

import tiktoken
from tqdm import tqdm

# Windows console encoding fix
if os.name == "nt":
    try:
        sys.stdout = codecs.getwriter("utf-8")(sys.stdout.buffer, "strict")
        sys.stderr = codecs.getwriter("utf-8")(sys.stderr.buffer, "strict")
    except AttributeError:
        pass  # Streams already replaced (e.g. under a test runner)

GITIGNORE_FILENAME = ".gitignore"
VCS_METADATA_DIR = ".git"
DEFAULT_LOG_FILE = "directory_flattening.log"

MODE_STRUCTURE_ONLY = "structure"
MODE_FULL = "full"

FILENAME_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"
GENERATED_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

NO_EXTENSION = "(no extension)"
GENERIC_TEXT_LABEL = "text"
SNIFF_BYTES = 8192

ENTRY_DIRECTORY = "directory"
ENTRY_FILE = "file"
ENTRY_SYMLINK = "symlink"
ENTRY_SPECIAL = "special"  # fifos, sockets, devices

# Extension -> fenced code block language label
TEXT_EXTENSIONS: Dict[str, str] = {
    "js": "javascript",
    "ts": "typescript",
    "tsx": "typescript",
    "json": "json",
    "md": "markdown",
    "txt": "text",
    "svg": "xml",
    "html": "html",
    "css": "css",
    "py": "python",
    "java": "java",
    "rb": "ruby",
    "sh": "bash",
    "bash": "bash",
    "zsh": "bash",
    "php": "php",
    "c": "c",
    "h": "c",
    "cpp": "cpp",
    "hpp": "cpp",
    "go": "go",
    "rs": "rust",
    "sql": "sql",
    "yaml": "yaml",
    "yml": "yaml",
    "xml": "xml",
}

IMAGE_EXTENSIONS: FrozenSet[str] = frozenset(
    ["png", "jpg", "jpeg", "gif", "ico", "webp", "bmp", "tiff"]
)

BINARY_EXTENSIONS: FrozenSet[str] = frozenset(
    [
        # Documents
        "pdf",
        "doc",
        "docx",
        "xls",
        "xlsx",
        "ppt",
        "pptx",
        # Archives
        "zip",
        "tar",
        "gz",
        "rar",
        # Executables and object code
        "bin",
        "exe",
        "dll",
        "so",
        "dylib",
        "o",
        "a",
        "class",
        "jar",
        "war",
        "ear",
        # Media
        "mp3",
        "mp4",
        "mov",
        "avi",
    ]
)

REASON_IMAGE = "image"
REASON_GENERIC_BINARY = "generic-binary"
REASON_CONTENT_SNIFF = "detected-binary-by-content-sniff"

BINARY_NOTICES: Dict[str, str] = {
    REASON_IMAGE: "Binary image file (content not displayed)",
    REASON_GENERIC_BINARY: "Binary file (content not displayed)",
    REASON_CONTENT_SNIFF: "Binary file detected (content not displayed)",
}
READ_ERROR_NOTICE = "Error reading file (content not displayed)"


def setup_logging(log_file: str, enable_logging: bool = True):
    """Configure logging with specified settings."""
    if enable_logging:
        logging.basicConfig(
            filename=log_file,
            level=logging.DEBUG,
            format="%(asctime)s - %(levelname)s - %(message)s",
            filemode="w",
        )
    else:
        logging.basicConfig(level=logging.ERROR, handlers=[logging.NullHandler()])


def report_warning(message: str) -> None:
    """Surface a recoverable problem on stderr and in the log."""
    logging.warning(message)
    print(f"Warning: {message}", file=sys.stderr)


def count_tokens(text: str) -> int:
    """Count tokens in text using tiktoken."""
    encoding = tiktoken.get_encoding("cl100k_base")
    return len(encoding.encode(text))


def estimate_tokens(text: str) -> int:
    try:
        return count_tokens(text)
    except Exception as e:
        # tiktoken fetches its encoding on first use; offline runs land here
        logging.error(f"Error counting tokens: {str(e)}")
        return len(text) // 4  # Rough estimate fallback


# ---------------------------------------------------------------------------
# Exclusion patterns
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PatternSet:
    """Immutable set of canonical exclusion patterns.

    Membership is exact and case-sensitive. Iteration is alphabetical, which
    only matters for display; matching never depends on order.
    """

    patterns: FrozenSet[str] = frozenset()

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.patterns))

    def __len__(self) -> int:
        return len(self.patterns)

    def __contains__(self, pattern) -> bool:
        return pattern in self.patterns


def canonicalize_pattern(raw: str) -> Optional[str]:
    """Strip whitespace, every trailing '/', then a single leading '/'.

    Returns None when nothing is left.
    """
    token = raw.strip().rstrip("/")
    if token.startswith("/"):
        token = token[1:]
    return token or None


def is_blank_or_comment(line: str) -> bool:
    stripped = line.strip()
    return not stripped or stripped.startswith("#")


def normalize_patterns(
    gitignore_lines: Optional[Iterable[str]],
    manual_tokens: Optional[Iterable[str]],
    use_gitignore: bool = True,
) -> PatternSet:
    """
    Merge .gitignore lines and manual tokens into one PatternSet.

    Blank and comment lines of the .gitignore source are skipped. When
    use_gitignore is set, the version-control directory is always part of
    the result, whether or not .gitignore lists it (or exists at all).
    """
    patterns = set()

    if use_gitignore:
        patterns.add(VCS_METADATA_DIR)
        for line in gitignore_lines or []:
            if is_blank_or_comment(line):
                continue
            canonical = canonicalize_pattern(line)
            if canonical:
                patterns.add(canonical)

    for token in manual_tokens or []:
        canonical = canonicalize_pattern(token)
        if canonical:
            patterns.add(canonical)

    return PatternSet(frozenset(patterns))


def load_gitignore_lines(root_path: str) -> Optional[List[str]]:
    """Read <root>/.gitignore, or return None (with a warning) if it is missing."""
    gitignore_path = os.path.join(root_path, GITIGNORE_FILENAME)

    if not os.path.isfile(gitignore_path):
        report_warning(
            f"{GITIGNORE_FILENAME} not found in the root of '{root_path}'. "
            "Continuing without it."
        )
        return None

    logging.info(f"Reading exclusions from {gitignore_path}")
    try:
        with open(gitignore_path, "r", encoding="utf-8", errors="replace") as f:
            return f.read().splitlines()
    except OSError as e:
        report_warning(f"Cannot read {gitignore_path}: {str(e)}. Continuing without it.")
        return None


def resolve_exclusions(
    root_path: str, use_gitignore: bool, manual_tokens: Iterable[str]
) -> PatternSet:
    gitignore_lines = load_gitignore_lines(root_path) if use_gitignore else None
    pattern_set = normalize_patterns(gitignore_lines, manual_tokens, use_gitignore)
    logging.info(f"Total exclusion patterns: {len(pattern_set)}")
    return pattern_set


def parse_patterns(pattern_list: List[str]) -> List[str]:
    """
    Parse pattern list handling both space-separated and comma-separated values.
    Returns a cleaned list of patterns with whitespace stripped.
    """
    processed = []
    for item in pattern_list:
        # Split on commas and whitespace alike
        processed.extend(item.replace(",", " ").split())
    return processed


class PathMatcher:
    """
    Decides whether a path is excluded by a PatternSet.

    A path is excluded when any pattern equals one of its segments or its
    basename. Patterns are compared literally: '*.log' only matches an entry
    literally named '*.log', and a multi-segment pattern such as 'src/gen'
    never equals a single segment.
    """

    def __init__(self, pattern_set: PatternSet):
        self.pattern_set = pattern_set

    @staticmethod
    def split_segments(path: str) -> List[str]:
        for separator in (os.sep, os.altsep):
            if separator and separator != "/":
                path = path.replace(separator, "/")
        return [segment for segment in path.split("/") if segment]

    def is_excluded(self, path: str) -> bool:
        patterns = self.pattern_set.patterns
        if not patterns:
            return False

        segments = self.split_segments(path)
        if not segments:
            return False

        basename = segments[-1]
        if basename in patterns:
            return True
        return any(segment in patterns for segment in segments)


# ---------------------------------------------------------------------------
# Tree walk
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FilesystemEntry:
    """A discovered regular file. relative_path always uses '/' separators."""

    path: str
    relative_path: str
    kind: str = ENTRY_FILE

    @property
    def name(self) -> str:
        return os.path.basename(self.path)


@dataclass
class TreeNode:
    name: str
    relative_path: str = ""
    kind: str = ENTRY_DIRECTORY
    children: List["TreeNode"] = field(default_factory=list)
    link_target: Optional[str] = None


@dataclass
class WalkResult:
    tree: TreeNode
    files: List[FilesystemEntry]
    excluded: List[str] = field(default_factory=list)


def _make_node(full_path: str, name: str, relative_path: str, is_dir: bool) -> TreeNode:
    """Build a listing node; raises OSError if a symlink cannot be read."""
    if os.path.islink(full_path):
        return TreeNode(
            name=name,
            relative_path=relative_path,
            kind=ENTRY_SYMLINK,
            link_target=os.readlink(full_path),
        )
    if is_dir:
        return TreeNode(name=name, relative_path=relative_path, kind=ENTRY_DIRECTORY)
    if os.path.isfile(full_path):
        return TreeNode(name=name, relative_path=relative_path, kind=ENTRY_FILE)
    return TreeNode(name=name, relative_path=relative_path, kind=ENTRY_SPECIAL)


def iter_files(node: TreeNode, root_path: str) -> Iterator[FilesystemEntry]:
    """Yield the regular files below node in depth-first listing order."""
    for child in node.children:
        if child.kind == ENTRY_FILE:
            yield FilesystemEntry(
                path=os.path.join(root_path, *child.relative_path.split("/")),
                relative_path=child.relative_path,
            )
        elif child.kind == ENTRY_DIRECTORY:
            yield from iter_files(child, root_path)


def walk_tree(root_path: str, matcher: PathMatcher) -> WalkResult:
    """
    Walk root_path once and build the listing tree and the flat file list.

    Entries are matched on their root-relative path before anything else
    happens to them, so an excluded directory is never descended into.
    Symlinks are listed but not followed. Unreadable directories are
    reported and skipped.
    """
    root_path = os.path.abspath(root_path)
    tree = TreeNode(name=".")
    nodes = {root_path: tree}
    excluded = []

    def on_walk_error(error: OSError) -> None:
        report_warning(f"Cannot read directory {error.filename}: {error.strerror}")

    for dirpath, dirnames, filenames in os.walk(
        root_path, onerror=on_walk_error, followlinks=False
    ):
        parent = nodes[dirpath]
        directory_names = set(dirnames)
        kept_dirs = []

        for name in sorted(dirnames + filenames):
            full_path = os.path.join(dirpath, name)
            relative_path = (
                f"{parent.relative_path}/{name}" if parent.relative_path else name
            )

            if matcher.is_excluded(relative_path):
                excluded.append(relative_path)
                logging.debug(f"Excluded: {relative_path}")
                continue

            try:
                child = _make_node(
                    full_path, name, relative_path, name in directory_names
                )
            except OSError as e:
                report_warning(f"Cannot access {relative_path}: {str(e)}")
                continue

            parent.children.append(child)
            if child.kind == ENTRY_DIRECTORY:
                nodes[full_path] = child
                kept_dirs.append(name)

        # Prune before descent
        dirnames[:] = kept_dirs

    files = list(iter_files(tree, root_path))
    logging.info(f"Walk complete: {len(files)} files included, {len(excluded)} paths excluded")
    return WalkResult(tree=tree, files=files, excluded=excluded)


def render_tree(tree: TreeNode) -> List[str]:
    """Serialize a listing tree in `tree -a` style."""
    lines = [tree.name]

    def add_children(node: TreeNode, prefix: str) -> None:
        for index, child in enumerate(node.children):
            is_last = index == len(node.children) - 1
            label = child.name
            if child.kind == ENTRY_SYMLINK:
                label += f" -> {child.link_target}"
            lines.append(prefix + ("└── " if is_last else "├── ") + label)
            if child.children:
                add_children(child, prefix + ("    " if is_last else "│   "))

    add_children(tree, "")
    return lines


# ---------------------------------------------------------------------------
# Content classification
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ClassificationVerdict:
    """Either displayable text with a language label, or a binary skip with a reason."""

    language: Optional[str] = None
    binary_reason: Optional[str] = None

    @classmethod
    def displayable_text(cls, language: str) -> "ClassificationVerdict":
        return cls(language=language)

    @classmethod
    def binary_skip(cls, reason: str) -> "ClassificationVerdict":
        return cls(binary_reason=reason)

    @property
    def is_binary(self) -> bool:
        return self.binary_reason is not None


def file_extension(filename: str) -> str:
    """Return the text after the last '.', or NO_EXTENSION."""
    if "." not in filename:
        return NO_EXTENSION
    return filename.rsplit(".", 1)[1] or NO_EXTENSION


def sniff_is_text(file_path: str) -> bool:
    """
    Read a bounded prefix and decide whether it looks like ASCII/UTF-8 text.

    A NUL byte marks the file as binary. A multi-byte character cut off at
    the end of the prefix is tolerated; anything else that fails to decode
    is binary. Empty files are text.
    """
    with open(file_path, "rb") as f:
        chunk = f.read(SNIFF_BYTES + 1)

    # One extra byte tells whether the prefix is the whole file
    at_end = len(chunk) <= SNIFF_BYTES
    chunk = chunk[:SNIFF_BYTES]

    if b"\x00" in chunk:
        return False

    decoder = codecs.getincrementaldecoder("utf-8")()
    try:
        decoder.decode(chunk, final=at_end)
    except UnicodeDecodeError:
        return False
    return True


def classify_file(file_path: str, filename: str) -> ClassificationVerdict:
    """Classify one file: known text extension, known binary extension, then sniff."""
    extension = file_extension(filename)

    if extension != NO_EXTENSION:
        # Case-insensitive: LOGO.PNG is an image, Main.PY is python
        key = extension.lower()
        if key in TEXT_EXTENSIONS:
            return ClassificationVerdict.displayable_text(TEXT_EXTENSIONS[key])
        if key in IMAGE_EXTENSIONS:
            return ClassificationVerdict.binary_skip(REASON_IMAGE)
        if key in BINARY_EXTENSIONS:
            return ClassificationVerdict.binary_skip(REASON_GENERIC_BINARY)

    try:
        if sniff_is_text(file_path):
            return ClassificationVerdict.displayable_text(GENERIC_TEXT_LABEL)
    except OSError as e:
        report_warning(f"Cannot sniff {file_path}: {str(e)}")

    logging.debug(f"Binary content detected: {file_path}")
    return ClassificationVerdict.binary_skip(REASON_CONTENT_SNIFF)


def escape_code_fences(content: str) -> str:
    """Break every run of three backticks so it cannot close the enclosing fence."""
    while "```" in content:
        content = content.replace("```", "`` `")
    return content


def read_text_content(file_path: str) -> str:
    """Read a text file, falling back from UTF-8 to latin-1."""
    with open(file_path, "rb") as f:
        raw = f.read()

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        # latin-1 maps every byte
        logging.warning(f"File {file_path} read with latin-1 encoding")
        return raw.decode("latin-1")


# ---------------------------------------------------------------------------
# Report assembly
# ---------------------------------------------------------------------------


def safe_write_to_output(output_file, content: str):
    """Safely write content to output file with Windows encoding handling."""
    try:
        output_file.write(content)
    except UnicodeEncodeError:
        # Fallback for Windows console - replace problematic chars
        safe_content = content.encode("ascii", "replace").decode("ascii")
        output_file.write(safe_content)
        logging.warning("Content written with ASCII fallback due to encoding issues")


def extension_frequencies(files: Iterable[FilesystemEntry]) -> List[Tuple[str, int]]:
    """Count extensions, sorted by count descending then extension ascending."""
    counts = Counter(file_extension(entry.name) for entry in files)
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))


def write_structure_document(
    output_file,
    folder_name: str,
    tree: TreeNode,
    generated_at: str,
    files: Optional[List[FilesystemEntry]] = None,
) -> None:
    """
    Write the structure report.

    The summary section is only written when `files` is given, i.e. when
    content flattening was requested.
    """
    safe_write_to_output(output_file, f"# Directory Structure: {folder_name}\n")
    safe_write_to_output(output_file, f"**Generated:** {generated_at}\n")
    safe_write_to_output(output_file, "\n## Folder and File Tree\n\n")
    safe_write_to_output(output_file, "```\n")
    for line in render_tree(tree):
        safe_write_to_output(output_file, line + "\n")
    safe_write_to_output(output_file, "```\n")

    if files is None:
        return

    safe_write_to_output(output_file, "\n## Summary\n\n")
    safe_write_to_output(
        output_file, f"Total files included in flattened output: {len(files)}\n"
    )
    if not files:
        safe_write_to_output(output_file, "\nNo files found to include.\n")
        return

    safe_write_to_output(output_file, "\n## Included File Types\n\n")
    safe_write_to_output(output_file, "```\n")
    for extension, count in extension_frequencies(files):
        safe_write_to_output(output_file, f"{extension}: {count}\n")
    safe_write_to_output(output_file, "```\n")


def write_flattened_document(
    output_file,
    folder_name: str,
    files: List[FilesystemEntry],
    generated_at: str,
    show_progress: bool = False,
) -> Dict[str, ClassificationVerdict]:
    """
    Write the flattened content report and return the verdict for each file,
    keyed by relative path.
    """
    safe_write_to_output(output_file, f"# Flattened Content: {folder_name}\n")
    safe_write_to_output(output_file, f"**Generated:** {generated_at}\n")

    if not files:
        safe_write_to_output(
            output_file, "\n## File Contents\n\nNo text files found to include.\n"
        )
        return {}

    safe_write_to_output(output_file, "\n## File Contents\n")

    verdicts = {}
    for entry in tqdm(files, desc="Flattening", unit="file", disable=not show_progress):
        verdict = classify_file(entry.path, entry.name)
        verdicts[entry.relative_path] = verdict

        safe_write_to_output(output_file, f"\n### `{entry.relative_path}`\n\n")

        if verdict.is_binary:
            logging.debug(f"Skipped binary file ({verdict.binary_reason}): {entry.path}")
            safe_write_to_output(
                output_file, f"**{BINARY_NOTICES[verdict.binary_reason]}**\n"
            )
            continue

        try:
            content = read_text_content(entry.path)
        except OSError as e:
            report_warning(f"Cannot read file {entry.relative_path}: {str(e)}")
            safe_write_to_output(output_file, f"**{READ_ERROR_NOTICE}**\n")
            continue

        content = escape_code_fences(content)
        safe_write_to_output(output_file, f"```{verdict.language}\n")
        safe_write_to_output(output_file, content)
        if not content.endswith("\n"):
            safe_write_to_output(output_file, "\n")
        safe_write_to_output(output_file, "```\n")

    return verdicts


# ---------------------------------------------------------------------------
# Configuration and orchestration
# ---------------------------------------------------------------------------


@dataclass
class FlattenConfig:
    """Static configuration for one run."""

    root: str
    output_dir: str = "."
    mode: str = MODE_FULL
    use_gitignore: bool = True
    manual_exclusions: List[str] = field(default_factory=list)
    show_progress: bool = False

    @property
    def flatten(self) -> bool:
        return self.mode == MODE_FULL


@dataclass
class ReportResult:
    structure_path: str
    flattened_path: Optional[str]
    pattern_set: PatternSet
    files: List[FilesystemEntry]
    excluded: List[str]
    extension_table: List[Tuple[str, int]]
    verdicts: Dict[str, ClassificationVerdict]
    total_tokens: Optional[int] = None


def folder_display_name(root_path: str) -> str:
    return os.path.basename(os.path.normpath(os.path.abspath(root_path))) or "root"


def build_output_paths(
    output_dir: str, folder_name: str, now: datetime
) -> Tuple[str, str]:
    stamp = now.strftime(FILENAME_TIMESTAMP_FORMAT)
    structure_path = os.path.join(output_dir, f"STRUCTURE_{folder_name}_{stamp}.md")
    flattened_path = os.path.join(output_dir, f"FLATTENED_{folder_name}_{stamp}.md")
    return structure_path, flattened_path


def generate_reports(
    config: FlattenConfig,
    now: Optional[datetime] = None,
    pattern_set: Optional[PatternSet] = None,
) -> ReportResult:
    """
    Run the whole pipeline: resolve exclusions, walk, write the reports.

    Raises NotADirectoryError for an invalid root and OSError if the output
    documents cannot be written. Everything else is reported as a warning.
    """
    root_path = os.path.abspath(config.root)
    if not os.path.isdir(root_path):
        raise NotADirectoryError(f"Invalid directory: {config.root}")

    now = now or datetime.now()
    if pattern_set is None:
        pattern_set = resolve_exclusions(
            root_path, config.use_gitignore, config.manual_exclusions
        )

    walk = walk_tree(root_path, PathMatcher(pattern_set))

    # The root .gitignore is exclusion input: listed in the tree, never flattened
    files = walk.files
    if config.use_gitignore:
        files = [entry for entry in files if entry.relative_path != GITIGNORE_FILENAME]

    folder_name = folder_display_name(root_path)
    structure_path, flattened_path = build_output_paths(
        config.output_dir, folder_name, now
    )
    generated_at = now.strftime(GENERATED_TIMESTAMP_FORMAT)
    os.makedirs(config.output_dir, exist_ok=True)

    logging.info(f"Writing structure document: {structure_path}")
    with open(structure_path, "w", encoding="utf-8") as output_file:
        write_structure_document(
            output_file,
            folder_name,
            walk.tree,
            generated_at,
            files if config.flatten else None,
        )

    if not config.flatten:
        return ReportResult(
            structure_path=structure_path,
            flattened_path=None,
            pattern_set=pattern_set,
            files=files,
            excluded=walk.excluded,
            extension_table=extension_frequencies(files),
            verdicts={},
        )

    if not files:
        report_warning("No files found to process after applying exclusions.")

    logging.info(f"Writing flattened document: {flattened_path}")
    with open(flattened_path, "w", encoding="utf-8") as output_file:
        verdicts = write_flattened_document(
            output_file,
            folder_name,
            files,
            generated_at,
            show_progress=config.show_progress,
        )

    with open(flattened_path, "r", encoding="utf-8") as f:
        total_tokens = estimate_tokens(f.read())
    logging.info(f"Total tokens: {total_tokens}")

    return ReportResult(
        structure_path=structure_path,
        flattened_path=flattened_path,
        pattern_set=pattern_set,
        files=files,
        excluded=walk.excluded,
        extension_table=extension_frequencies(files),
        verdicts=verdicts,
        total_tokens=total_tokens,
    )


def prompt_for_config(
    config: FlattenConfig, input_func: Optional[Callable[[str], str]] = None
) -> FlattenConfig:
    """Ask the three interactive questions and return an updated config."""
    input_func = input_func or input

    print("Select output type:")
    print("  [1] Structure file only")
    print("  [2] Structure file AND Flattened content file (default)")
    output_choice = input_func("Enter your choice [1-2]: ").strip() or "2"
    mode = MODE_FULL if output_choice == "2" else MODE_STRUCTURE_ONLY

    print()
    use_gitignore_choice = (
        input_func(
            "Do you want to exclude all files and folders listed in .gitignore? "
            "([1] Yes / [0] No, default: 1): "
        ).strip()
        or "1"
    )

    print()
    print("You can now specify additional items to exclude from the output.")
    print()
    manual = input_func(
        "Enter additional items to exclude (space-separated), or press Enter to skip: "
    ).split()

    return dataclasses.replace(
        config,
        mode=mode,
        use_gitignore=use_gitignore_choice == "1",
        manual_exclusions=list(config.manual_exclusions) + manual,
    )


def print_exclusions(pattern_set: PatternSet) -> None:
    print()
    if len(pattern_set):
        print("--- The following patterns will be excluded: ---")
        for pattern in pattern_set:
            print(f"  - {pattern}")
        print("-----------------------------------------------")
    else:
        print("--- No exclusion patterns are being used. ---")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate a directory structure report and a flattened content report"
    )

    # Positional argument
    parser.add_argument("directory_path", help="Path to the directory to process")

    # Output configuration
    parser.add_argument(
        "--output-dir",
        default=".",
        help="Directory the STRUCTURE_/FLATTENED_ reports are written to (default: .)",
    )
    parser.add_argument(
        "--structure-only",
        action="store_true",
        default=False,
        help="Only generate the structure file (skip the flattened content file)",
    )

    # Exclusions
    parser.add_argument(
        "--no-gitignore",
        action="store_true",
        default=False,
        help="Do not read exclusions from <directory>/.gitignore (and do not exclude .git)",
    )
    parser.add_argument(
        "--exclude",
        nargs="+",
        default=[],
        help="Additional names to exclude anywhere in the tree (e.g. 'node_modules', 'dist'). "
        "Accepts space-separated or comma-separated values. "
        "Matched literally against whole path segments; wildcards are not expanded.",
    )
    parser.add_argument(
        "--interactive",
        action="store_true",
        default=False,
        help="Prompt for output type, .gitignore use and extra exclusions",
    )

    # Logging configuration
    parser.add_argument(
        "--enable-logging",
        action="store_true",
        default=False,
        help="Enable detailed logging to file",
    )
    parser.add_argument(
        "--log-file",
        default=DEFAULT_LOG_FILE,
        help=f"Log file path (default: {DEFAULT_LOG_FILE})",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        default=False,
        help="Disable the progress bar while flattening",
    )

    return parser


def build_config(
    args: argparse.Namespace, input_func: Optional[Callable[[str], str]] = None
) -> FlattenConfig:
    config = FlattenConfig(
        root=args.directory_path,
        output_dir=args.output_dir,
        mode=MODE_STRUCTURE_ONLY if args.structure_only else MODE_FULL,
        use_gitignore=not args.no_gitignore,
        manual_exclusions=parse_patterns(args.exclude),
        show_progress=not args.no_progress,
    )
    if args.interactive:
        config = prompt_for_config(config, input_func)
    return config


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    # Setup logging
    setup_logging(args.log_file, args.enable_logging)

    # Validate directory
    if not os.path.isdir(args.directory_path):
        logging.error(f"Invalid directory: {args.directory_path}")
        print(f"Error: Invalid directory: {args.directory_path}")
        sys.exit(1)

    config = build_config(args)
    logging.info(f"Configuration: {config}")

    pattern_set = resolve_exclusions(
        os.path.abspath(config.root), config.use_gitignore, config.manual_exclusions
    )
    print_exclusions(pattern_set)

    print()
    print("Generating directory structure...")
    if config.flatten:
        print("Generating flattened content file...")

    try:
        result = generate_reports(config, pattern_set=pattern_set)
    except OSError as e:
        logging.error(f"Error during processing: {str(e)}")
        print(f"Error during processing: {str(e)}")
        sys.exit(1)

    print()
    print("---")
    print("Success!")
    print(f"Directory structure written to: {result.structure_path}")
    if result.flattened_path:
        print(f"Flattened content written to: {result.flattened_path}")
        print(f"Total files included: {len(result.files)}")
        print(f"Total tokens: {result.total_tokens:,}")

    # Show excluded paths summary
    if result.excluded:
        print(f"\nExcluded {len(result.excluded)} paths")
        if args.enable_logging:
            print("(See log file for complete list)")
        else:
            print("Examples:")
            for excluded in result.excluded[:5]:
                print(f"  - {excluded}")
            if len(result.excluded) > 5:
                print(f"  ... and {len(result.excluded) - 5} more")


if __name__ == "__main__":
    main()
