from __future__ import annotations

import pytest

from trellis.exceptions import ParameterError, PluginError
from trellis.plugin import Plugin
from trellis.plugins import BUILTIN_PLUGINS


class StatusPlugin(Plugin):
    name = "status-only"
    supported_module_types = ("generic", "custom")

    async def get_module_build_status(self, module):
        return {"ready": True, "from": self.name}


class ParsePlugin(Plugin):
    name = "custom-parser"
    supported_module_types = ("custom",)

    def parse_module(self, ctx, config):
        return ("parsed", config)


def test_builtin_plugins_register_in_fixed_order(ctx):
    names = [p.name for p in ctx.plugins.all_plugins()]
    assert names == ["generic", "container", "generic-function", "npm-package"]
    assert len(BUILTIN_PLUGINS) == len(ctx.plugins)


def test_register_same_name_twice_fails(ctx):
    ctx.register_plugin(StatusPlugin)
    with pytest.raises(PluginError) as exc_info:
        ctx.register_plugin(StatusPlugin)

    assert "status-only" in str(exc_info.value)
    assert exc_info.value.detail["previous"].name == "status-only"


def test_register_builtin_name_again_fails(ctx):
    class Impostor(Plugin):
        name = "generic"

    with pytest.raises(PluginError):
        ctx.register_plugin(Impostor)


@pytest.mark.parametrize("bad_name", ["Generic", "has_underscore", "-leading", "trailing-", "double--dash", "", None])
def test_invalid_plugin_names_are_rejected(ctx, bad_name):
    class Bad(Plugin):
        name = bad_name

    with pytest.raises(PluginError):
        ctx.register_plugin(Bad)
    assert bad_name not in ctx.plugins


def test_distinct_plugins_resolve_independently(ctx):
    ctx.register_plugin(StatusPlugin)
    ctx.register_plugin(ParsePlugin)

    parse = ctx.get_action_handler("parse_module", "custom")
    assert parse(ctx, "cfg") == ("parsed", "cfg")

    assert ctx.plugins.get_handler("get_module_build_status", "status-only") is not None
    assert ctx.plugins.get_handler("parse_module", "status-only") is None
    assert ctx.plugins.get_handler("build_module", "custom-parser") is None
    assert "custom-parser" in ctx.plugins.handlers("parse_module")
    assert "custom-parser" not in ctx.plugins.handlers("get_module_build_status")


def test_handlers_forward_arguments_to_plugin_instance(ctx):
    seen = []

    class Recorder(Plugin):
        name = "recorder"
        supported_module_types = ("recorded",)

        def parse_module(self, *args, **kwargs):
            seen.append((self, args, kwargs))
            return "ok"

    plugin = ctx.register_plugin(Recorder)
    handler = ctx.get_action_handler("parse_module", "recorded")

    assert handler(1, 2, key="value") == "ok"
    assert seen == [(plugin, (1, 2), {"key": "value"})]


def test_factory_receives_context(ctx):
    received = []

    def factory(c):
        received.append(c)
        plugin = StatusPlugin(c)
        return plugin

    ctx.register_plugin(factory)
    assert received == [ctx]


def test_plain_object_plugins_are_supported(ctx):
    class Bare:
        name = "bare"
        supported_module_types = ("bare",)

        def build_module(self, module, force=False):
            return {"built": module}

    ctx.register_plugin(lambda c: Bare())
    assert ctx.get_action_handler("build_module", "bare")("m") == {"built": "m"}


def test_all_plugins_filters_by_module_type(ctx):
    ctx.register_plugin(StatusPlugin)
    ctx.register_plugin(ParsePlugin)

    assert [p.name for p in ctx.plugins.all_plugins("custom")] == ["status-only", "custom-parser"]
    assert [p.name for p in ctx.plugins.all_plugins("container")] == ["container"]
    assert ctx.plugins.all_plugins("unknown-type") == []


def test_get_plugin_unknown_name(ctx):
    with pytest.raises(PluginError):
        ctx.plugins.get_plugin("nope")


def test_extra_plugins_passed_to_context_register_after_builtins(make_project):
    from trellis.context import Context

    c = Context(make_project(), plugins=[StatusPlugin])
    assert [p.name for p in c.plugins.all_plugins()][-1] == "status-only"


def test_unknown_action_name(ctx):
    with pytest.raises(ParameterError):
        ctx.get_action_handler("deploy_everything")
