from __future__ import annotations

import json
import os
import subprocess
import tempfile
from pathlib import Path
from typing import Any

from ..errors import ToolchainError


def run_helper(request: dict[str, Any], *, go: str) -> dict[str, Any]:
    """Run the embedded Go helper once and return its decoded JSON response.

    The helper is compiled from a throwaway module on every call; nothing is
    cached between runs.
    """
    with tempfile.TemporaryDirectory(prefix="ctxgen-gohelper-") as td:
        helper_dir = Path(td)
        (helper_dir / "go.mod").write_text(
            "\n".join(
                [
                    "module ctxgen.gohelper",
                    "",
                    "go 1.18",
                    "",
                ]
            ),
            encoding="utf-8",
        )
        (helper_dir / "main.go").write_text(_helper_go_source(), encoding="utf-8")

        env = dict(os.environ)
        # Never let an enclosing workspace or `go generate` module leak in.
        env["GOWORK"] = "off"
        # Build with the installed toolchain instead of downloading one.
        env["GOTOOLCHAIN"] = "local"
        env.pop("GOFLAGS", None)

        try:
            proc = subprocess.run(
                [go, "run", "."],
                cwd=str(helper_dir),
                env=env,
                input=json.dumps(request),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                check=False,
            )
        except FileNotFoundError as e:
            raise ToolchainError(
                f"Go toolchain not found (`{go}` is missing from PATH). "
                "Install Go or point CTXGEN_GO at the go binary."
            ) from e

        if proc.returncode != 0:
            raise ToolchainError(f"go helper failed ({request.get('op')})\n{proc.stderr}")

        try:
            obj = json.loads(proc.stdout)
        except ValueError as e:
            raise ToolchainError(f"failed to parse go helper output: {e}\n{proc.stdout}") from e
        if not isinstance(obj, dict):
            raise ToolchainError(f"unexpected go helper output: {proc.stdout}")
        return obj


def _helper_go_source() -> str:
    # Keep this file stdlib-only so `go run` doesn't need network access.
    return r'''
package main

import (
	"encoding/json"
	"fmt"
	"go/ast"
	"go/format"
	"go/parser"
	"go/token"
	"go/types"
	"os"
	"strconv"
)

type fileIn struct {
	Path string `json:"path"`
	Src  string `json:"src"`
}

type request struct {
	Op    string   `json:"op"`
	Files []fileIn `json:"files"`
	Src   string   `json:"src"`
}

type typeOut map[string]any

type fieldOut struct {
	Names []string `json:"names"`
	Type  typeOut  `json:"type"`
}

type funcOut struct {
	Name       string     `json:"name"`
	Recv       *fieldOut  `json:"recv"`
	TypeParams bool       `json:"type_params"`
	Params     []fieldOut `json:"params"`
	Results    []fieldOut `json:"results"`
}

type importOut struct {
	Name string `json:"name,omitempty"`
	Path string `json:"path"`
}

type fileOut struct {
	Path    string      `json:"path"`
	Error   string      `json:"error,omitempty"`
	Package string      `json:"package"`
	Imports []importOut `json:"imports"`
	Funcs   []funcOut   `json:"funcs"`
}

func main() {
	var req request
	if err := json.NewDecoder(os.Stdin).Decode(&req); err != nil {
		fail(fmt.Sprintf("decode request: %v", err))
	}

	var out any
	switch req.Op {
	case "parse":
		files := make([]fileOut, 0, len(req.Files))
		for _, f := range req.Files {
			files = append(files, parseFile(f))
		}
		out = map[string]any{"files": files}
	case "format":
		src, err := format.Source([]byte(req.Src))
		if err != nil {
			out = map[string]any{"error": err.Error()}
		} else {
			out = map[string]any{"src": string(src)}
		}
	default:
		fail(fmt.Sprintf("unknown op %q", req.Op))
	}

	enc := json.NewEncoder(os.Stdout)
	enc.SetEscapeHTML(false)
	if err := enc.Encode(out); err != nil {
		fail(fmt.Sprintf("encode response: %v", err))
	}
}

func fail(msg string) {
	fmt.Fprintln(os.Stderr, msg)
	os.Exit(2)
}

func parseFile(in fileIn) fileOut {
	fs := token.NewFileSet()
	af, err := parser.ParseFile(fs, in.Path, in.Src, 0)
	if err != nil {
		return fileOut{Path: in.Path, Error: err.Error()}
	}

	out := fileOut{
		Path:    in.Path,
		Package: af.Name.Name,
		Imports: []importOut{},
		Funcs:   []funcOut{},
	}
	for _, spec := range af.Imports {
		p, err := strconv.Unquote(spec.Path.Value)
		if err != nil {
			return fileOut{Path: in.Path, Error: fmt.Sprintf("bad import path %s", spec.Path.Value)}
		}
		imp := importOut{Path: p}
		if spec.Name != nil {
			imp.Name = spec.Name.Name
		}
		out.Imports = append(out.Imports, imp)
	}
	for _, decl := range af.Decls {
		fd, ok := decl.(*ast.FuncDecl)
		if !ok {
			continue
		}
		fn := funcOut{
			Name:       fd.Name.Name,
			TypeParams: fd.Type.TypeParams != nil && len(fd.Type.TypeParams.List) > 0,
			Params:     fields(fd.Type.Params),
			Results:    fields(fd.Type.Results),
		}
		if fd.Recv != nil && len(fd.Recv.List) > 0 {
			r := field(fd.Recv.List[0])
			fn.Recv = &r
		}
		out.Funcs = append(out.Funcs, fn)
	}
	return out
}

func fields(fl *ast.FieldList) []fieldOut {
	out := []fieldOut{}
	if fl == nil {
		return out
	}
	for _, f := range fl.List {
		out = append(out, field(f))
	}
	return out
}

func field(f *ast.Field) fieldOut {
	names := []string{}
	for _, n := range f.Names {
		names = append(names, n.Name)
	}
	return fieldOut{Names: names, Type: renderType(f.Type)}
}

func renderType(e ast.Expr) typeOut {
	switch t := e.(type) {
	case *ast.Ident:
		return typeOut{"kind": "ident", "name": t.Name}
	case *ast.StarExpr:
		return typeOut{"kind": "pointer", "elem": renderType(t.X)}
	case *ast.SelectorExpr:
		if x, ok := t.X.(*ast.Ident); ok {
			return typeOut{"kind": "selector", "pkg": x.Name, "name": t.Sel.Name}
		}
	case *ast.ArrayType:
		// Fixed-size arrays are reported as unsupported.
		if t.Len == nil {
			return typeOut{"kind": "slice", "elem": renderType(t.Elt)}
		}
	case *ast.MapType:
		return typeOut{"kind": "map", "key": renderType(t.Key), "value": renderType(t.Value)}
	}
	return typeOut{"kind": "unsupported", "text": types.ExprString(e)}
}
'''
