"""Shared test fixtures for the BPEL query test suite.

Provides a sample BPEL 2.0 process, a lookup helper for activities by
name, and isolation of the cached settings between tests.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest
from lxml import etree

from src.bpel.nodes import XmlNode, wrap
from src.core.config import get_settings

ORDER_PROCESS = """<process name="OrderProcess"
         xmlns="http://docs.oasis-open.org/wsbpel/2.0/process/executable">
  <partnerLinks>
    <partnerLink name="client"/>
  </partnerLinks>
  <sequence name="main">
    <receive name="receiveOrder" partnerLink="client" createInstance="yes"/>
    <flow name="mainFlow" suppressJoinFailure="yes">
      <links>
        <link name="L1"/>
        <link name="L2"/>
        <link name="L3"/>
      </links>
      <invoke name="checkCredit" outputVariable="credit">
        <sources>
          <source linkName="L1"/>
          <source linkName="L2"/>
        </sources>
      </invoke>
      <assign name="prepare">
        <sources>
          <source linkName="L3"/>
        </sources>
      </assign>
      <sequence name="shipping">
        <targets>
          <target linkName="L1"/>
          <target linkName="L3"/>
        </targets>
        <!-- ship once the credit check passed -->
        <invoke name="ship" suppressJoinFailure="no"/>
      </sequence>
      <scope name="billing">
        <targets>
          <joinCondition>$L2</joinCondition>
          <target linkName="L2"/>
        </targets>
        <empty name="noop"/>
      </scope>
    </flow>
  </sequence>
</process>"""


def parse(xml: str) -> XmlNode:
    """Parse an XML snippet and wrap its root element."""
    return wrap(etree.fromstring(xml))


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Make every test start from default settings."""
    for var in ("BPEL_TRUE_VALUE", "IMPLICIT_JOIN_OPERATOR", "STRICT_LINK_NAMES", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def order_process() -> XmlNode:
    """The sample order process as a wrapped root element."""
    return parse(ORDER_PROCESS)


@pytest.fixture
def activity(order_process: XmlNode) -> Callable[[str], XmlNode]:
    """Return a function looking up an element of the order process by its name attribute."""

    def _lookup(name: str) -> XmlNode:
        matches = order_process.element.xpath("//*[@name=$name]", name=name)
        assert len(matches) == 1, f"expected one element named {name!r}"
        return XmlNode(matches[0])

    return _lookup
