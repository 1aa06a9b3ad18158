from pathlib import Path

import pytest

from junitledger.config import LedgerConfig
from junitledger.db import DBConfig

LOGIN_TESTS_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<testsuites>
    <testsuite name="Login Tests!!" package="com.example.login" tests="2" time="1.5">
        <properties>
            <property name="browser" value="firefox"/>
        </properties>
        <testcase name="test_login_ok" classname="login.LoginTest" time="0.25">
            <properties>
                <property name="owner" value="auth-team"/>
            </properties>
            <system-out>logged in</system-out>
        </testcase>
        <testcase name="test_login_bad_password" classname="login.LoginTest" time="1.25">
            <failure message="expected 401" type="AssertionError">Traceback: line 12</failure>
            <system-err>warning: slow response</system-err>
        </testcase>
        <system-out>suite output</system-out>
    </testsuite>
</testsuites>
"""


@pytest.fixture
def db_config():
    return DBConfig(path=None)


@pytest.fixture
def config(db_config):
    return LedgerConfig(db_config=db_config)


@pytest.fixture
def db(db_config):
    with db_config.connect() as db:
        yield db


@pytest.fixture
def login_tests_xml(tmp_path) -> Path:
    path = tmp_path / "login.xml"
    path.write_bytes(LOGIN_TESTS_XML)
    return path
