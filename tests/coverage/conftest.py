"""Shared Clover report fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

CLOVER_XML = """\
<?xml version="1.0" encoding="UTF-8"?>
<coverage generated="1700000000" clover="4.4.1">
  <project name="demo" timestamp="1700000000">
    <metrics packages="1" files="2" classes="2" loc="40" ncloc="30"
             statements="4" coveredstatements="2" conditionals="2" coveredconditionals="1"
             methods="1" coveredmethods="1" elements="7" coveredelements="4" complexity="3"/>
    <package name="app">
      <metrics files="2" classes="2" statements="4" coveredstatements="2"/>
      <file name="Foo.php" path="/src/app/Foo.php">
        <class name="Foo">
          <metrics complexity="2" methods="1" coveredmethods="1" statements="3"/>
        </class>
        <line num="3" type="method" name="bar" count="2"/>
        <line num="4" type="stmt" count="0"/>
        <line num="5" type="stmt" count="1"/>
        <line num="6" type="stmt" count="2"/>
        <line num="7" type="cond" truecount="1" falsecount="0"/>
        <metrics classes="1" loc="20" ncloc="15" statements="3" coveredstatements="2"/>
      </file>
      <file name="Bar.php" path="/src/app/Bar.php">
        <class name="Bar"/>
        <line num="10" type="stmt" count="4"/>
        <line num="12" type="cond" truecount="2" falsecount="3"/>
      </file>
    </package>
  </project>
</coverage>
"""


@pytest.fixture
def clover_xml() -> bytes:
    return CLOVER_XML.encode("utf-8")


@pytest.fixture
def clover_file(tmp_path: Path) -> Path:
    path = tmp_path / "clover.xml"
    path.write_text(CLOVER_XML)
    return path
