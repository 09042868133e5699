import pytest
from rich.tree import Tree

from branchopt.exceptions import BranchoptError, DeclarationError
from branchopt.parser.option import Option
from branchopt.parser.parser_types import NodeType, OptionType, ShortMode, UnknownMode
from branchopt.parser.tree import ProgramTree


@pytest.fixture
def root():
    return ProgramTree("program", NodeType.PROGRAM)


def add_option(node, name, *aliases, opt_type=OptionType.STRING):
    option = Option(name, opt_type, aliases=list(aliases))
    node.add_child_option(name, option)
    for alias in aliases:
        node.add_child_option(alias, option)
    return option


def test_option_declared_before_command_is_copied(root):
    option = add_option(root, "rootopt", "r")
    command = ProgramTree("cmd")
    root.add_child_command("cmd", command)
    assert command.child_options["rootopt"] is option
    assert command.child_options["r"] is option
    assert command.parent is root
    assert command.level == 1


def test_option_declared_after_command_is_propagated(root):
    command = ProgramTree("cmd")
    root.add_child_command("cmd", command)
    sub = ProgramTree("sub")
    command.add_child_command("sub", sub)
    option = add_option(root, "rootopt")
    assert command.child_options["rootopt"] is option
    assert sub.child_options["rootopt"] is option


def test_help_and_skip_nodes_are_not_propagated(root):
    help_node = ProgramTree("help", is_help_command=True)
    skip_node = ProgramTree("raw", skip_options_copy=True)
    root.add_child_command("help", help_node)
    root.add_child_command("raw", skip_node)
    add_option(root, "rootopt")
    assert help_node.child_options == {}
    assert skip_node.child_options == {}
    late_skip = ProgramTree("late", skip_options_copy=True)
    root.add_child_command("late", late_skip)
    assert late_skip.child_options == {}


def test_duplicate_option_on_node(root):
    add_option(root, "name", "n")
    with pytest.raises(DeclarationError):
        add_option(root, "n")
    with pytest.raises(DeclarationError):
        add_option(root, "name")


def test_empty_option_name(root):
    with pytest.raises(DeclarationError):
        root.add_child_option("", Option("x", OptionType.STRING))


def test_alias_collision_with_descendant(root):
    command = ProgramTree("command")
    root.add_child_command("command", command)
    add_option(command, "password", "p")
    with pytest.raises(DeclarationError):
        add_option(root, "profile", "p")


def test_alias_collision_with_ancestor(root):
    add_option(root, "profile", "p")
    command = ProgramTree("command")
    root.add_child_command("command", command)
    with pytest.raises(DeclarationError):
        add_option(command, "password", "p")


def test_command_with_colliding_options_is_rejected(root):
    add_option(root, "name")
    orphan = ProgramTree("orphan")
    add_option(orphan, "name")
    with pytest.raises(DeclarationError):
        root.add_child_command("orphan", orphan)


def test_invalid_min_max_is_a_declaration_error(root):
    option = Option("list", OptionType.STRING_REPEAT, min_args=2, max_args=1)
    with pytest.raises(DeclarationError):
        root.add_child_option("list", option)


def test_duplicate_and_empty_command(root):
    root.add_child_command("cmd", ProgramTree("cmd"))
    with pytest.raises(DeclarationError):
        root.add_child_command("cmd", ProgramTree("cmd"))
    with pytest.raises(DeclarationError):
        root.add_child_command("", ProgramTree(""))


def test_settings_are_inherited(root):
    command = ProgramTree("cmd")
    root.add_child_command("cmd", command)
    assert command.mode == ShortMode.NORMAL
    assert command.unknown_mode == UnknownMode.FAIL
    root.mode = "bundling"
    root.unknown_mode = UnknownMode.PASS
    root.require_order = True
    assert command.mode == ShortMode.BUNDLING
    assert command.unknown_mode == UnknownMode.PASS
    assert command.require_order is True
    command.require_order = False
    assert command.require_order is False
    assert root.require_order is True


def test_get_node_and_full_name(root):
    log = ProgramTree("log")
    sub = ProgramTree("sub-log")
    root.add_child_command("log", log)
    log.add_child_command("sub-log", sub)
    assert root.get_node("log", "sub-log") is sub
    assert sub.full_name == "program log sub-log"
    assert [node.name for node in root.iter_nodes()] == ["program", "log", "sub-log"]
    with pytest.raises(BranchoptError):
        root.get_node("show")


def test_options_are_unique(root):
    first = add_option(root, "name", "n", "nm")
    second = add_option(root, "debug", opt_type=OptionType.BOOL)
    assert root.options() == [first, second]


def test_reset(root):
    option = add_option(root, "name")
    option.mark_called("name")
    option.save("x")
    root.child_text.append("text")
    root.reset()
    assert option.value == ""
    assert not option.called
    assert root.child_text == []


def test_describe_and_rich_tree(root):
    add_option(root, "name", "n")
    root.add_child_command("cmd", ProgramTree("cmd"))
    description = root.describe()
    assert description["name"] == "program"
    assert set(description["child_options"]) == {"n", "name"}
    assert description["child_commands"]["cmd"]["parent"] == "program"
    assert isinstance(root.to_rich_tree(), Tree)
