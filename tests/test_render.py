from __future__ import annotations

import pytest
from gopayload import (
    CTX,
    fetch_with_context,
    field,
    func,
    ident,
    map_of,
    ping_with_context,
    ptr,
    sel,
    slice_of,
    unit,
)

from ctxgen.errors import RenderError
from ctxgen.gosrc.parse import decode_unit
from ctxgen.render import RenderBuffer, render_decl
from ctxgen.synth import synthesize, synthesize_unit


def _buffer(*units, include_package: bool = True) -> RenderBuffer:
    buf = RenderBuffer(include_package=include_package)
    for payload in units:
        u = decode_unit(payload["path"], payload)
        buf.add_unit(u, synthesize_unit(u))
    return buf


def test_render_method_forwarder():
    u = decode_unit("a.go", unit("a.go", [fetch_with_context()]))
    assert render_decl(synthesize(u.decls[0])) == (
        "func (c *Client) Fetch(id string) (*Item, error) {\n"
        "\treturn c.FetchWithContext(context.Background(), id)\n"
        "}\n"
    )


def test_render_free_function_forwarder():
    u = decode_unit("a.go", unit("a.go", [ping_with_context()]))
    assert render_decl(synthesize(u.decls[0])) == (
        "func Ping() error {\n"
        "\treturn PingWithContext(context.Background())\n"
        "}\n"
    )


def test_render_without_results_has_no_return():
    u = decode_unit(
        "a.go",
        unit("a.go", [func("ResetWithContext", [CTX, field(["a", "b"], ident("int"))])]),
    )
    assert render_decl(synthesize(u.decls[0])) == (
        "func Reset(a, b int) {\n"
        "\tResetWithContext(context.Background(), a, b)\n"
        "}\n"
    )


def test_render_named_results_keep_parentheses():
    u = decode_unit(
        "a.go",
        unit("a.go", [func("SizeWithContext", [CTX], [field("n", ident("int64"))])]),
    )
    assert render_decl(synthesize(u.decls[0])).startswith("func Size() (n int64) {\n")


def test_generate_whole_file_with_imports():
    buf = _buffer(unit("a.go", [fetch_with_context(), ping_with_context()]))
    assert buf.generate() == (
        "package api\n"
        "\n"
        'import "context"\n'
        "\n"
        "func (c *Client) Fetch(id string) (*Item, error) {\n"
        "\treturn c.FetchWithContext(context.Background(), id)\n"
        "}\n"
        "\n"
        "func Ping() error {\n"
        "\treturn PingWithContext(context.Background())\n"
        "}\n"
    )


def test_generate_drops_unused_imports_and_adds_referenced_ones():
    payload = unit(
        "a.go",
        [
            func(
                "ServeWithContext",
                [
                    CTX,
                    field("w", sel("http", "ResponseWriter")),
                    field("ids", slice_of(sel("uuid", "UUID"))),
                    field("tags", map_of(ident("string"), ptr(sel("m", "Tag")))),
                ],
                [field("", ident("error"))],
            )
        ],
        imports=[
            {"path": "context"},
            {"path": "net/http"},
            {"path": "os"},
            {"path": "github.com/google/uuid"},
            {"path": "github.com/acme/models/v2", "name": "m"},
            {"path": "github.com/acme/unused"},
        ],
    )
    out = _buffer(payload).generate()
    assert out.startswith(
        "package api\n"
        "\n"
        "import (\n"
        '\t"context"\n'
        '\t"net/http"\n'
        "\n"
        '\tm "github.com/acme/models/v2"\n'
        '\t"github.com/google/uuid"\n'
        ")\n"
        "\n"
        "func Serve(w http.ResponseWriter, ids []uuid.UUID, tags map[string]*m.Tag) error {\n"
    )
    assert '"os"' not in out
    assert "unused" not in out


def test_generate_adds_context_import_even_when_source_aliases_it():
    payload = unit("a.go", [ping_with_context()], imports=[{"path": "context", "name": "stdctx"}])
    assert 'import "context"\n' in _buffer(payload).generate()


def test_generate_concatenates_files_in_order_under_first_package():
    buf = _buffer(
        unit("b.go", [ping_with_context()], package="svc"),
        unit("a.go", [fetch_with_context()], package="svc"),
    )
    out = buf.generate()
    assert out.startswith("package svc\n")
    assert out.index("func Ping()") < out.index("func (c *Client) Fetch(")
    assert out.count("import") == 1


def test_generate_without_forwarders_is_just_the_package_clause():
    buf = _buffer(unit("a.go", [func("Helper", [field("x", ident("int"))])]))
    assert buf.generate() == "package api\n"


def test_generate_empty_buffer_renders_nothing():
    assert RenderBuffer().generate() == ""


def test_snippet_mode_has_no_header_or_imports():
    out = _buffer(unit("a.go", [ping_with_context()]), include_package=False).generate()
    assert out == "func Ping() error {\n\treturn PingWithContext(context.Background())\n}\n"


def test_unresolvable_qualifier_is_a_render_error():
    payload = unit(
        "a.go",
        [func("LoadWithContext", [CTX, field("id", sel("uuid", "UUID"))])],
        imports=[{"path": "context"}],
    )
    with pytest.raises(RenderError, match="'uuid'"):
        _buffer(payload).generate()


def test_unresolvable_qualifier_fails_in_snippet_mode_too():
    payload = unit("a.go", [func("LoadWithContext", [CTX, field("id", sel("uuid", "UUID"))])])
    with pytest.raises(RenderError):
        _buffer(payload, include_package=False).generate()


def test_generate_is_idempotent():
    buf = _buffer(unit("a.go", [fetch_with_context(), ping_with_context()]))
    assert buf.generate() == buf.generate()
    again = _buffer(unit("a.go", [fetch_with_context(), ping_with_context()]))
    assert again.generate() == buf.generate()


def test_output_uses_unix_line_endings_only():
    out = _buffer(unit("a.go", [fetch_with_context(), ping_with_context()])).generate()
    assert "\r" not in out
    assert out.endswith("}\n") and not out.endswith("\n\n")


def test_generate_resolves_versioned_import_by_last_path_element():
    payload = unit(
        "a.go",
        [func("GetWithContext", [CTX, field("p", ptr(sel("v1", "Pod")))], [field("", ident("error"))])],
        imports=[{"path": "context"}, {"path": "k8s.io/api/core/v1"}],
    )
    out = _buffer(payload).generate()
    assert '\t"k8s.io/api/core/v1"\n' in out
    assert "func Get(p *v1.Pod) error {\n" in out


def test_generate_resolves_qualifiers_per_file():
    html = unit(
        "a.go",
        [func("RenderWithContext", [CTX, field("t", ptr(sel("template", "Template")))])],
        imports=[{"path": "context"}, {"path": "html/template"}],
    )
    text = unit(
        "b.go",
        [ping_with_context()],
        imports=[{"path": "context"}, {"path": "text/template"}],
    )
    out = _buffer(html, text).generate()
    assert '\t"html/template"\n' in out
    assert "text/template" not in out


def test_generate_rejects_one_qualifier_used_for_two_paths():
    html = unit(
        "a.go",
        [func("RenderWithContext", [CTX, field("t", ptr(sel("template", "Template")))])],
        imports=[{"path": "html/template"}],
    )
    text = unit(
        "b.go",
        [func("ParseWithContext", [CTX, field("t", ptr(sel("template", "Template")))])],
        imports=[{"path": "text/template"}],
    )
    with pytest.raises(RenderError, match="refers to different imports"):
        _buffer(html, text).generate()
