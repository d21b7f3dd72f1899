"""Command completion: the REPL completer and shell completion scripts."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from bytestashy.commands import COMMAND_CLASSES

PROG = "bytestashy"

COMMANDS = {cls.name: cls.description for cls in COMMAND_CLASSES}
COMMANDS.update({"quit": "Exit the shell", "exit": "Exit the shell"})

COMMAND_OPTIONS = {
    "login": [],
    "logout": [],
    "create": ["--title", "--description", "--categories", "--public", "--private"],
    "update": ["--title", "--description", "--categories", "--public", "--private", "--force"],
    "list": ["--all", "--number", "--page"],
    "get": ["--output", "--print", "--force"],
    "delete": ["--force"],
    "search": ["--sort", "--search-code"],
    "config": ["--page-size"],
    "help": [cls.name for cls in COMMAND_CLASSES],
}

# Commands whose positional arguments are local files
FILE_COMMANDS = {"create", "update"}

GLOBAL_OPTIONS = ["--shell", "--verbose", "--version", "--help"]

SHELLS = ("bash", "zsh", "fish", "powershell")

OPTION_META = {
    "--title": "snippet title",
    "--description": "snippet description",
    "--categories": "comma-separated categories",
    "--public": "visible to everyone",
    "--private": "visible to you only",
    "--force": "skip confirmation / overwrite",
    "--all": "fetch every page",
    "--number": "page size",
    "--page": "page number",
    "--output": "target directory",
    "--print": "print instead of writing files",
    "--sort": "newest, oldest, alpha-asc, alpha-desc",
    "--search-code": "also search file contents",
    "--page-size": "default page size",
}


class CommandCompleter(Completer):
    """Completer for the interactive shell."""

    def get_completions(self, document: Document, complete_event) -> Iterable[Completion]:
        text = document.text_before_cursor
        words = text.split()

        if len(words) == 0 or (len(words) == 1 and not text.endswith(" ")):
            word = words[0].lower() if words else ""
            for cmd, desc in COMMANDS.items():
                if cmd.startswith(word):
                    yield Completion(cmd, start_position=-len(word), display_meta=desc)
            return

        cmd = words[0].lower()
        current = "" if text.endswith(" ") else words[-1]

        if cmd in FILE_COMMANDS and not current.startswith("-"):
            yield from self._complete_path(current)

        for opt in COMMAND_OPTIONS.get(cmd, []):
            if opt.startswith(current):
                yield Completion(opt, start_position=-len(current), display_meta=OPTION_META.get(opt, ""))

    def _complete_path(self, partial: str) -> Iterable[Completion]:
        path = Path(partial).expanduser() if partial else Path(".")

        if partial == "" or partial.endswith("/"):
            parent, prefix = path, ""
        else:
            parent, prefix = path.parent, path.name

        if not parent.is_dir():
            return
        try:
            entries = sorted(parent.iterdir(), key=lambda x: (not x.is_dir(), x.name.lower()))
        except PermissionError:
            return

        for item in entries:
            if item.name.startswith(prefix) and not item.name.startswith("."):
                completion = str(item) if partial else item.name
                if item.is_dir():
                    completion += "/"
                yield Completion(
                    completion,
                    start_position=-len(partial),
                    display=item.name + ("/" if item.is_dir() else ""),
                    display_meta="folder" if item.is_dir() else "file",
                )


def render_shell_completion(shell: str) -> str:
    """Completion script for ``shell``, to be sourced by the user."""
    renderers = {"bash": _bash, "zsh": _zsh, "fish": _fish, "powershell": _powershell}
    if shell not in renderers:
        raise ValueError(f"Unsupported shell: {shell} (choose from {', '.join(SHELLS)})")
    return renderers[shell]()


def _subcommands() -> list[str]:
    return [cls.name for cls in COMMAND_CLASSES]


def _bash() -> str:
    cases = []
    for cmd, options in COMMAND_OPTIONS.items():
        files = " -f" if cmd in FILE_COMMANDS else ""
        cases.append(
            f'        {cmd}) COMPREPLY=( $(compgen{files} -W "{" ".join(options)}" -- "$cur") ) ;;'
        )
    return "\n".join([
        f"_{PROG}() {{",
        '    local cur="${COMP_WORDS[COMP_CWORD]}"',
        '    if [ "$COMP_CWORD" -eq 1 ]; then',
        f'        COMPREPLY=( $(compgen -W "{" ".join(_subcommands() + GLOBAL_OPTIONS)}" -- "$cur") )',
        "        return 0",
        "    fi",
        '    case "${COMP_WORDS[1]}" in',
        *cases,
        "    esac",
        "}",
        f"complete -o default -F _{PROG} {PROG}",
        "",
    ])


def _zsh() -> str:
    described = [f"'{cls.name}:{cls.description}'" for cls in COMMAND_CLASSES]
    cases = []
    for cmd, options in COMMAND_OPTIONS.items():
        files = "; _files" if cmd in FILE_COMMANDS else ""
        cases.append(f"        {cmd}) compadd -- {' '.join(options)}{files} ;;")
    return "\n".join([
        f"#compdef {PROG}",
        "",
        f"_{PROG}() {{",
        "    local -a commands",
        f"    commands=({' '.join(described)})",
        "    if (( CURRENT == 2 )); then",
        "        _describe 'command' commands",
        "        return",
        "    fi",
        "    case $words[2] in",
        *cases,
        "    esac",
        "}",
        "",
        f'compdef _{PROG} {PROG}',
        "",
    ])


def _fish() -> str:
    lines = [f"complete -c {PROG} -f"]
    for opt in GLOBAL_OPTIONS:
        lines.append(f"complete -c {PROG} -n '__fish_use_subcommand' -l {opt[2:]}")
    for cls in COMMAND_CLASSES:
        lines.append(
            f"complete -c {PROG} -n '__fish_use_subcommand' -a {cls.name} -d '{cls.description}'"
        )
    for cmd, options in COMMAND_OPTIONS.items():
        condition = f"'__fish_seen_subcommand_from {cmd}'"
        if cmd in FILE_COMMANDS:
            lines.append(f"complete -c {PROG} -n {condition} -F")
        for opt in options:
            if opt.startswith("--"):
                meta = OPTION_META.get(opt, "")
                lines.append(f"complete -c {PROG} -n {condition} -l {opt[2:]} -d '{meta}'")
            else:
                lines.append(f"complete -c {PROG} -n {condition} -a {opt}")
    lines.append("")
    return "\n".join(lines)


def _powershell() -> str:
    commands = ", ".join(f"'{name}'" for name in _subcommands())
    cases = [
        f"            '{cmd}' {{ @({', '.join(repr(o) for o in options)}) }}"
        for cmd, options in COMMAND_OPTIONS.items()
    ]
    return "\n".join([
        f"Register-ArgumentCompleter -Native -CommandName {PROG} -ScriptBlock {{",
        "    param($wordToComplete, $commandAst, $cursorPosition)",
        "    $words = @($commandAst.CommandElements | ForEach-Object { $_.ToString() })",
        "    if ($words.Count -le 1 -or ($words.Count -eq 2 -and $wordToComplete)) {",
        f"        $candidates = @({commands})",
        "    } else {",
        "        $candidates = switch ($words[1]) {",
        *cases,
        "            default { @() }",
        "        }",
        "    }",
        "    $candidates | Where-Object { $_ -like \"$wordToComplete*\" } | ForEach-Object {",
        "        [System.Management.Automation.CompletionResult]::new($_, $_, 'ParameterValue', $_)",
        "    }",
        "}",
        "",
    ])
