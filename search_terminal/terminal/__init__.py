"""Command interpreter, search dispatch and filter replay."""

from search_terminal.terminal.commands import Command, classify
from search_terminal.terminal.dispatcher import SearchDispatcher
from search_terminal.terminal.interpreter import CommandInterpreter
from search_terminal.terminal.replay import ReplayController

__all__ = ["Command", "CommandInterpreter", "ReplayController", "SearchDispatcher", "classify"]
