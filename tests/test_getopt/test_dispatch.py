import pytest

from branchopt import GetOpt
from branchopt.exceptions import (
    BranchoptError,
    MissingRequiredArgumentError,
    MissingRequiredOptionError,
    ConversionError,
)
from branchopt.signals import HelpSignal


@pytest.fixture
def calls():
    return []


@pytest.fixture
def program(fake_io, calls):
    async def run_log(context, opt, args):
        calls.append(("log", context, opt.value("lines"), opt.called("debug"), args))
        return "log-result"

    def run_show(context, opt, args):
        calls.append(("show", context, args))
        return "show-result"

    opt = GetOpt("program", "Example program", diagnostics=fake_io.diagnostics)
    opt.bool("debug", description="Debug output")
    log = opt.new_command("log", "Show logs", command_fn=run_log)
    log.int("lines", 10)
    opt.new_command("show", "Show things").set_command_fn(run_show)
    deploy = opt.new_command("deploy", "Deploy things")
    deploy.string("target", required=True)
    deploy.set_command_fn(run_show)
    opt.new_command("empty", "No command function")
    opt.help_command("help", description="Show help")
    return opt


@pytest.mark.asyncio
async def test_dispatch_async_command(program, calls):
    remaining = program.parse(["--debug", "log", "--lines", "3", "file"])
    result = await program.dispatch(remaining, context="ctx")
    assert result == "log-result"
    assert calls == [("log", "ctx", 3, True, ["file"])]


@pytest.mark.asyncio
async def test_dispatch_sync_command(program, calls):
    remaining = program.parse(["show", "a", "b"])
    result = await program.dispatch(remaining)
    assert result == "show-result"
    assert calls == [("show", None, ["a", "b"])]


@pytest.mark.asyncio
async def test_dispatch_checks_required_on_final_node(program):
    remaining = program.parse(["deploy"])
    with pytest.raises(MissingRequiredOptionError):
        await program.dispatch(remaining)


@pytest.mark.asyncio
async def test_help_option_wins_over_required(program, fake_io):
    remaining = program.parse(["deploy", "--help"])
    with pytest.raises(HelpSignal):
        await program.dispatch(remaining)
    assert "program deploy - Deploy things" in fake_io.out.getvalue()


@pytest.mark.asyncio
async def test_command_without_fn(program):
    remaining = program.parse(["empty"])
    with pytest.raises(BranchoptError, match="command 'empty' has no defined command function"):
        await program.dispatch(remaining)


@pytest.mark.asyncio
async def test_root_without_fn_prints_help(program, fake_io):
    remaining = program.parse([])
    assert await program.dispatch(remaining) is None
    output = fake_io.out.getvalue()
    assert "SYNOPSIS:" in output
    assert "Use 'program help <command>' for extra details." in output


@pytest.mark.asyncio
async def test_help_command_for_parent(program, fake_io):
    remaining = program.parse(["help"])
    with pytest.raises(HelpSignal):
        await program.dispatch(remaining)
    output = fake_io.out.getvalue()
    assert "COMMANDS:" in output
    assert "log       Show logs" in output


@pytest.mark.asyncio
async def test_help_command_topic(program, fake_io):
    remaining = program.parse(["help", "log"])
    with pytest.raises(HelpSignal):
        await program.dispatch(remaining)
    assert "program log - Show logs" in fake_io.out.getvalue()


@pytest.mark.asyncio
async def test_help_command_unknown_topic(program):
    remaining = program.parse(["help", "nope"])
    with pytest.raises(BranchoptError, match="no help topic for 'nope'"):
        await program.dispatch(remaining)


@pytest.mark.asyncio
async def test_nested_help_command(program, fake_io):
    remaining = program.parse(["log", "help"])
    with pytest.raises(HelpSignal):
        await program.dispatch(remaining)
    assert "program log - Show logs" in fake_io.out.getvalue()


@pytest.mark.asyncio
async def test_command_added_after_help_gets_help(fake_io):
    opt = GetOpt("program", diagnostics=fake_io.diagnostics)
    opt.help_command("help")
    late = opt.new_command("late", "Late command")
    assert "help" in late.program_tree.child_commands
    remaining = opt.parse(["late", "--help"])
    with pytest.raises(HelpSignal):
        await opt.dispatch(remaining)


def test_get_required_arg(fake_io):
    opt = GetOpt("program", diagnostics=fake_io.diagnostics)
    opt.help_synopsis_arg("<file>", "File to read")
    opt.help_synopsis_arg("<count>", "How many")
    value, rest = opt.get_required_arg(["a.txt", "3"])
    assert (value, rest) == ("a.txt", ["3"])
    count, rest = opt.get_required_arg_int(rest)
    assert (count, rest) == (3, [])


def test_get_required_arg_missing(fake_io):
    opt = GetOpt("program", diagnostics=fake_io.diagnostics)
    opt.help_synopsis_arg("<file>", "File to read")
    with pytest.raises(MissingRequiredArgumentError):
        opt.get_required_arg([])
    assert "ERROR: Missing required argument: <file>" in fake_io.err.getvalue()
    assert "SYNOPSIS:" in fake_io.out.getvalue()
    with pytest.raises(MissingRequiredArgumentError, match="ERROR: Missing required argument"):
        opt.get_required_arg([])


def test_get_required_arg_conversions(fake_io):
    opt = GetOpt("program", diagnostics=fake_io.diagnostics)
    value, rest = opt.get_required_arg_float(["1.5"])
    assert value == 1.5
    with pytest.raises(ConversionError, match="Can't convert string to int: 'x'"):
        opt.get_required_arg_int(["x"])
    with pytest.raises(ConversionError, match="Can't convert string to float: 'x'"):
        opt.get_required_arg_float(["x"])
