"""Shared pytest fixtures"""

import pytest
from io import StringIO
from rich.console import Console

from aws_path_analyzer.analyzer.errors import BlockingError
from aws_path_analyzer.analyzer.nodes import Capability, Node
from aws_path_analyzer.models import EvaluationResult, RoutingTarget, RuleEvaluation


class FakeNode(Node):
    """Scriptable node: fixed hops, optional error, optional rule verdict."""

    def __init__(
        self,
        node_id,
        kind="Fake",
        target=None,
        hops=None,
        error=None,
        capabilities=(),
        evaluation=None,
        account_id="111111111111",
    ):
        self._id = node_id
        self._kind = kind
        self._target = target or RoutingTarget()
        self.hops = list(hops or [])
        self.error = error
        self._capabilities = frozenset(capabilities)
        self.evaluation = evaluation
        self.account_id = account_id
        self.calls = 0
        self.contexts = []
        self.targets = []

    @property
    def node_id(self):
        return self._id

    @property
    def owner_scope(self):
        return self.account_id

    @property
    def kind(self):
        return self._kind

    def routing_target(self):
        return self._target

    def next_hops(self, target, ctx):
        self.calls += 1
        self.contexts.append(ctx)
        self.targets.append(target)
        if self.error is not None:
            raise self.error
        return list(self.hops)

    def capabilities(self):
        return self._capabilities

    def evaluate(self, target, direction):
        return self.evaluation


def blocking(node_id, reason):
    return BlockingError(node_id, reason)


def deny(reason, rule_id="sg-rule-1"):
    return EvaluationResult(
        allowed=False,
        reason=reason,
        evaluations=[
            RuleEvaluation(rule_id=rule_id, rule_type="security-group", action="deny")
        ],
    )


def allow(rule_id="sg-rule-1"):
    return EvaluationResult(
        allowed=True,
        reason="allowed",
        evaluations=[
            RuleEvaluation(
                rule_id=rule_id, rule_type="security-group", action="allow", matched=True
            )
        ],
    )


class FakeAccountContext:
    """Stand-in AccountContext that records resolved scopes."""

    def __init__(self):
        self.resolved = []
        self.regions = ["us-east-1"]

    def resolve(self, scope):
        self.resolved.append(scope)
        return None

    def client(self, scope, service, region=None):
        raise AssertionError("no AWS calls expected")


@pytest.fixture
def fake_node():
    return FakeNode


@pytest.fixture
def account_context():
    return FakeAccountContext()


@pytest.fixture
def mock_console():
    """Create a console that captures output"""
    output = StringIO()
    console = Console(file=output, force_terminal=True, width=160)
    console._output = output
    return console


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep tests away from the real ~/.cache config"""
    from aws_path_analyzer.core import config

    monkeypatch.setattr(config, "CONFIG_DIR", tmp_path / "cfg")
    monkeypatch.setattr(config, "CONFIG_FILE", tmp_path / "cfg" / "config.json")
    return config
