"""Usage text shown by the HELP command."""

from __future__ import annotations

HELP_TOPICS: dict[str, str] = {
    "AUTO": "AUTO [start[,increment]]\n"
            "Automatically generates line numbers. Press Enter on a blank line to exit.",
    "CLS": "CLS\nClears the screen.",
    "DATA": "DATA <value1>[,<value2>...]\n"
            "Stores numeric and string constants that are accessed by READ statements.",
    "DIM": "DIM <var>(<size>)[,...]\nAllocates space for arrays.",
    "END": "END\nTerminates program execution.",
    "FILES": "FILES\nLists all saved programs.",
    "FOR": "FOR <var>=<start> TO <end> [STEP <increment>]\n"
           "Creates a loop that executes a block of code a specified number of times.",
    "GOSUB": "GOSUB <line_number>\nBranches to a subroutine at the specified line number.",
    "GOTO": "GOTO <line_number>\nBranches unconditionally to the specified line number.",
    "HELP": "HELP [<command>]\nDisplays help information for commands.",
    "IF": "IF <condition> THEN <statement_or_line_number>\n"
          "Executes a statement or branches to a line number if a condition is true.",
    "INPUT": 'INPUT ["<prompt>";]<variable>\n'
             "Pauses the program and waits for the user to enter data.",
    "KILL": 'KILL "<filename>"\nDeletes a saved program.',
    "LET": "LET <variable> = <expression>\n"
           "Assigns the value of an expression to a variable. The LET keyword is optional.",
    "LIST": "LIST [<start>][-[<end>]]\nLists the lines of the program currently in memory.",
    "LOAD": 'LOAD "<filename>"\nLoads a saved program into memory.',
    "NEW": "NEW\nDeletes the current program and all variables from memory.",
    "NEXT": "NEXT [<variable>[,<variable>...]]\n"
            "Marks the end of a FOR loop and increments the loop counter.",
    "ON": "ON <expr> GOTO/GOSUB <line1>[,<line2>...]\n"
          "Branches to a line number based on the value of an expression.",
    "POKE": "POKE <address>,<value>\nWrites a byte value into a memory location.",
    "PRINT": "PRINT <expr>[,|;]...\nPrints data to the screen.",
    "READ": "READ <variable>[,<variable>...]\n"
            "Reads values from a DATA statement and assigns them to variables.",
    "REM": "REM <comment>\nIncludes a non-executable comment in the program.",
    "RESTORE": "RESTORE\nResets the DATA pointer to the beginning of the first DATA statement.",
    "RETURN": "RETURN\nReturns from a subroutine.",
    "RUN": 'RUN ["<filename>" | <line_number>]\n'
           "Executes the program currently in memory, or loads a saved program and executes it.",
    "SAVE": 'SAVE "<filename>"\nSaves the current program.',
}


def help_lines(topic: str) -> list[str]:
    """Output lines for ``HELP [topic]``."""
    topic = topic.strip().upper()
    if not topic:
        return [
            "Available commands:",
            ", ".join(sorted(HELP_TOPICS)),
            "",
            "Type HELP <command> for more info.",
        ]
    text = HELP_TOPICS.get(topic)
    if text is None:
        return [f"?No help found for {topic}"]
    return text.split("\n")
