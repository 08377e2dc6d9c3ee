"""Tests for CLI interface."""

import json
import os
import tempfile

from click.testing import CliRunner

from ynlgen.generator.cli import cli

INCONSISTENT = """
name: broken
attribute-sets:
  - { name: main, name-prefix: broken-attr-, attributes: [ { name: a, type: u8 } ] }
operations:
  name-prefix: broken-cmd-
  list:
    - { name: get, attribute-set: main, do: { reply: { attributes: [ nope ] } } }
"""


def _write(text):
    with tempfile.NamedTemporaryFile("w", suffix=".yaml", delete=False) as f:
        f.write(text)
    return f.name


def describe_gen_command():
    def writes_code_to_stdout(expect, nlctrl_path):
        result = CliRunner().invoke(cli, ["gen", nlctrl_path])
        expect(result.exit_code) == 0
        expect('"""Module nlctrl is generated' in result.output) == True
        expect("def do_getfamily(self, req: DoGetfamilyRequest)" in result.output) == True

    def overrides_package_name(expect, nlctrl_path):
        result = CliRunner().invoke(cli, ["gen", "-p", "genl", nlctrl_path])
        expect(result.exit_code) == 0
        expect('"""Module genl is generated' in result.output) == True

    def writes_code_to_file(expect, nlctrl_path):
        with tempfile.NamedTemporaryFile(suffix=".py", delete=False) as f:
            output_file = f.name

        try:
            result = CliRunner().invoke(
                cli,
                ["gen", nlctrl_path, "-o", output_file, "--runtime-import", "ynl_runtime"],
            )
            expect(result.exit_code) == 0
            with open(output_file) as f:
                content = f.read()
            expect("from ynl_runtime import genetlink, uapi" in content) == True
        finally:
            os.unlink(output_file)

    def requires_spec_argument(expect):
        result = CliRunner().invoke(cli, ["gen"])
        expect(result.exit_code) == 2
        expect("Missing argument" in result.output) == True

    def reports_missing_file(expect):
        result = CliRunner().invoke(cli, ["gen", "/nonexistent/spec.yaml"])
        expect(result.exit_code) == 1
        expect("failed to open file" in result.output) == True

    def reports_parse_errors(expect):
        path = _write("name: [unterminated\n")
        try:
            result = CliRunner().invoke(cli, ["gen", path])
            expect(result.exit_code) == 1
            expect("failed to parse YAML netlink file" in result.output) == True
        finally:
            os.unlink(path)

    def reports_inconsistent_specs(expect):
        path = _write(INCONSISTENT)
        try:
            result = CliRunner().invoke(cli, ["gen", path])
            expect(result.exit_code) == 1
            expect("failed to generate code" in result.output) == True
        finally:
            os.unlink(path)


def describe_info_command():
    def outputs_json(expect, nlctrl_path):
        result = CliRunner().invoke(cli, ["info", nlctrl_path, "--json"])
        expect(result.exit_code) == 0

        data = json.loads(result.output)
        expect(data["family"]["name"]) == "nlctrl"
        expect(data["attribute_sets"]["main"]["name_prefix"]) == "ctrl-attr-"
        expect(data["operations"]["getfamily"]["methods"]) == ["do_getfamily", "dump_getfamily"]
        expect(data["operations"]["newfamily"]["methods"]) == []
        expect(data["operations"]["newfamily"]["notify"]) == "getfamily"
        expect("ops (array-nest)" in data["unimplemented"]) == True

    def outputs_tables(expect, nlctrl_path):
        result = CliRunner().invoke(cli, ["info", nlctrl_path])
        expect(result.exit_code) == 0
        expect("Operations" in result.output) == True
        expect("getpolicy" in result.output) == True

    def reports_inconsistent_specs(expect):
        path = _write(INCONSISTENT)
        try:
            result = CliRunner().invoke(cli, ["info", path])
            expect(result.exit_code) == 1
            expect("failed to plan bindings" in result.output) == True
        finally:
            os.unlink(path)


def describe_runtime_command():
    def writes_runtime_package(expect):
        with tempfile.TemporaryDirectory() as tmp:
            result = CliRunner().invoke(cli, ["runtime", "-o", tmp, "--name", "ynl_runtime"])
            expect(result.exit_code) == 0
            files = sorted(os.listdir(os.path.join(tmp, "ynl_runtime")))
            expect(files) == ["__init__.py", "attributes.py", "genetlink.py", "uapi.py"]
