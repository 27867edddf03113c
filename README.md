# stackmerge

`stackmerge` reads hierarchical YAML stack configuration files and resolves
their `import` sections, which may use glob patterns and a template context
for each import. It deep-merges the results and produces the final
configuration of every Terraform and helmfile component in each stack.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## How a stack is processed

For each stack file:

1. `stackmerge.loader.process_yaml_config_file` loads the file and all of its
   imports recursively.
   - An import is either a plain path or a mapping with `path` and `context`.
   - An import without an extension gets `.yaml`.
   - An import is a glob pattern relative to the stacks directory. `**` is
     supported.
   - Before an imported file is parsed, the merged context is applied to it as
     a template. The merged context is the parent's context with the import's
     own context on top.
   - The imports are deep-merged in order, and the file's own content is
     merged last.
2. `stackmerge.processor.process_stack_config` takes the merged document. For
   each component it combines, in this order:
   - the global `vars`, `settings` and `env` sections with the `terraform` or
     `helmfile` section;
   - the component's base components, given by `component:` and
     `metadata.inherits`;
   - the component's own sections.

   For Terraform components it then works out the final `backend_type`,
   `backend`, `remote_state_backend_type`, `remote_state_backend` and
   `command`:
   - an `s3` backend without a `workspace_key_prefix` gets one derived from
     the base or component name;
   - an `azurerm` backend gets a derived `key`.

   It also records the inheritance chain, and, if asked, the import files
   that each component depends on (`deps`).

Abstract components (`metadata.type: abstract`) have
`settings.spacelift.workspace_enabled` removed from their final settings.

## Usage

```python
from stackmerge.processor import process_yaml_config_files

yaml_docs, stacks, raw = process_yaml_config_files(
    "stacks",
    "components/terraform",
    "components/helmfile",
    ["stacks/orgs/acme/dev/us-east-2.yaml"],
    False,   # process_stack_deps (accepted, has no effect)
    True,    # process_component_deps
    False,   # ignore_missing_files
)

dev = stacks["orgs/acme/dev/us-east-2"]
vpc = dev["components"]["terraform"]["infra/vpc"]
print(vpc["backend_type"], vpc["backend"])
print(dev["imports"])
```

The call returns three values:

* `yaml_docs`: one YAML document per input file, in input order.
* `stacks`: the final configuration of each stack. The key is the stack's
  path relative to the stacks directory, without the `.yaml` or `.yml`
  extension. Each value holds `components` and a sorted list of `imports`.
* `raw`: for each stack, its own raw document (`stack`) and the raw documents
  of its imports (`imports`).

The files are processed in parallel threads.

`stackmerge.processor.create_component_stack_map` processes every YAML file
under the directory of a given file. For each component type, it maps every
component to the stacks that define it.

## Errors

These problems raise `stackmerge.merge.StackConfigError`, with a message that
names the file or stack:

* an invalid section;
* a missing base component;
* an import with no matches;
* an empty import;
* a file that imports itself;
* invalid YAML.

A stack file that does not exist raises `OSError`, unless
`ignore_missing_files` is set. A template that refers to a key missing from
its context raises `stackmerge.templates.TemplateError`.

File contents and glob results are cached for each path for the life of the
process. A file that changes after it was first read is not read again.

## Helpers

* `stackmerge.merge.merge` deep-merges a list of mappings. Later mappings win.
  Nested mappings are merged, and lists are replaced.
* `stackmerge.inheritance` holds `BaseComponentConfig`,
  `process_base_component_config` and
  `find_components_derived_from_base_components`.
* `stackmerge.dependencies` holds `StackImport`, `parse_imports`,
  `find_component_dependencies` and `find_component_stacks`.
* `stackmerge.serialize` converts to and from JSON and YAML, and prints or
  writes the result.
  - `convert_to_json` sorts keys, indents by three spaces and escapes `&`, `<`
    and `>`.
  - `convert_to_json_fast` is compact, and rounds floats to six decimal
    places.
* `stackmerge.hcl` provides two writers:
  - `convert_to_hcl`, `print_as_hcl` and `write_to_file_as_hcl` render a
    mapping as HCL;
  - `write_terraform_backend_config_to_file_as_hcl` writes a
    `terraform { backend "<type>" { ... } }` block with the scalar attributes
    only.
* `stackmerge.globbing` provides `split_pattern`, `path_match` and
  `get_glob_matches`.
* `stackmerge.templates.process_template` fills in these template actions:
  - `{{ .key }}` and `{{ .a.b }}` placeholders;
  - quoted string literals;
  - `{{/* comments */}}`;
  - `{{-`/`-}}` whitespace trimming.
* `stackmerge.files`, `stackmerge.seqs` and `stackmerge.console` hold small
  helpers for paths, string lists and coloured terminal output.

## What it does not do

`stackmerge` is a library only. It has no command-line tool.

It does not run Terraform or helmfile. It does not build stack dependency
lists from other stacks: the `process_stack_deps` argument is accepted but
changes nothing.