from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from .. import gotool
from ..errors import ParseError, ScanError, SourceNotFoundError
from ..paths import go_binary
from .document import DeclarationDocument

logger = logging.getLogger(__name__)


def scan_source(*, source: Path) -> DeclarationDocument:
    """Parse one Go file with `go/parser` and return its declaration document.

    The scanner is a small stdlib-only Go program run with `go run` from a
    throwaway module, so no network access is needed.
    """
    source = Path(source)
    if not source.is_file():
        raise SourceNotFoundError(f"source file not found: {source}")
    if not os.access(source, os.R_OK):
        raise SourceNotFoundError(f"source file is not readable: {source}")

    with tempfile.TemporaryDirectory(prefix="ridicule-goscan-") as td:
        scan_dir = Path(td)
        (scan_dir / "go.mod").write_text(
            "\n".join(
                [
                    "module ridicule.goscan",
                    "",
                    "go 1.22",
                    "",
                ]
            ),
            encoding="utf-8",
        )
        (scan_dir / "main.go").write_text(_scanner_go_source(), encoding="utf-8")

        # The throwaway module must not be resolved against a user's go.work.
        env = dict(os.environ)
        env["GOWORK"] = "off"
        logger.debug("scanning %s", source)
        out = gotool.run(
            [go_binary(), "run", ".", "--file", str(source.resolve())],
            cwd=scan_dir,
            env=env,
            error=ScanError,
        )

    return decode_scan_output(out, source=source)


def decode_scan_output(out: str, *, source: Path) -> DeclarationDocument:
    try:
        obj = json.loads(out)
    except ValueError as e:
        raise ScanError(f"failed to parse go scan output: {e}\n{out}") from e

    if isinstance(obj, dict) and obj.get("error") is not None:
        err = obj["error"]
        msg = err.get("message") if isinstance(err, dict) else str(err)
        raise ParseError(f"parsing {source}: {msg}")

    return DeclarationDocument.from_json(obj)


def _scanner_go_source() -> str:
    # Keep this file stdlib-only so `go run` doesn't need network access.
    return r'''
package main

import (
	"encoding/json"
	"flag"
	"fmt"
	"go/ast"
	"go/parser"
	"go/token"
	"go/types"
	"os"
	"reflect"
)

type outField struct {
	Names []string       `json:"names"`
	Type  map[string]any `json:"type"`
}

type outImport struct {
	Name string `json:"name,omitempty"`
	Path string `json:"path"`
}

type outType struct {
	Name       string         `json:"name"`
	TypeParams []outField     `json:"type_params"`
	Type       map[string]any `json:"type"`
}

type outError struct {
	Kind    string `json:"kind"`
	Message string `json:"message"`
}

type outDoc struct {
	Package string      `json:"package,omitempty"`
	Imports []outImport `json:"imports"`
	Types   []outType   `json:"types"`
	Error   *outError   `json:"error,omitempty"`
}

func main() {
	var file string
	flag.StringVar(&file, "file", "", "Go source file to scan")
	flag.Parse()

	if file == "" {
		fmt.Fprintln(os.Stderr, "missing --file")
		os.Exit(2)
	}

	doc := outDoc{Imports: []outImport{}, Types: []outType{}}

	fs := token.NewFileSet()
	af, err := parser.ParseFile(fs, file, nil, parser.ParseComments)
	if err != nil {
		doc.Error = &outError{Kind: "parse", Message: err.Error()}
		emit(doc)
		return
	}

	doc.Package = af.Name.Name
	for _, imp := range af.Imports {
		o := outImport{Path: imp.Path.Value}
		if imp.Name != nil {
			o.Name = imp.Name.Name
		}
		doc.Imports = append(doc.Imports, o)
	}

	// Inspect reaches type specs at any depth, including function bodies.
	ast.Inspect(af, func(n ast.Node) bool {
		ts, ok := n.(*ast.TypeSpec)
		if !ok || ts.Name == nil {
			return true
		}
		doc.Types = append(doc.Types, outType{
			Name:       ts.Name.Name,
			TypeParams: fields(ts.TypeParams),
			Type:       node(ts.Type),
		})
		return true
	})

	emit(doc)
}

func emit(doc outDoc) {
	enc := json.NewEncoder(os.Stdout)
	enc.SetEscapeHTML(false)
	if err := enc.Encode(doc); err != nil {
		fmt.Fprintf(os.Stderr, "encode: %v\n", err)
		os.Exit(1)
	}
}

func fields(fl *ast.FieldList) []outField {
	out := []outField{}
	if fl == nil {
		return out
	}
	for _, f := range fl.List {
		names := []string{}
		for _, n := range f.Names {
			names = append(names, n.Name)
		}
		out = append(out, outField{Names: names, Type: node(f.Type)})
	}
	return out
}

func node(e ast.Expr) map[string]any {
	switch t := e.(type) {
	case nil:
		return map[string]any{"kind": "unknown", "node": "nil"}
	case *ast.Ident:
		return map[string]any{"kind": "ident", "name": t.Name}
	case *ast.SelectorExpr:
		return map[string]any{"kind": "selector", "x": node(t.X), "sel": t.Sel.Name}
	case *ast.StarExpr:
		return map[string]any{"kind": "star", "x": node(t.X)}
	case *ast.ArrayType:
		m := map[string]any{"kind": "array", "elt": node(t.Elt)}
		if t.Len != nil {
			m["len"] = types.ExprString(t.Len)
		}
		return m
	case *ast.MapType:
		return map[string]any{"kind": "map", "key": node(t.Key), "value": node(t.Value)}
	case *ast.Ellipsis:
		return map[string]any{"kind": "ellipsis", "elt": node(t.Elt)}
	case *ast.ChanType:
		dir := "both"
		switch t.Dir {
		case ast.SEND:
			dir = "send"
		case ast.RECV:
			dir = "recv"
		}
		return map[string]any{"kind": "chan", "dir": dir, "value": node(t.Value)}
	case *ast.FuncType:
		return map[string]any{"kind": "func", "params": fields(t.Params), "results": fields(t.Results)}
	case *ast.InterfaceType:
		return map[string]any{"kind": "interface", "methods": fields(t.Methods)}
	case *ast.IndexExpr:
		return map[string]any{"kind": "index", "x": node(t.X), "indices": []map[string]any{node(t.Index)}}
	case *ast.IndexListExpr:
		indices := []map[string]any{}
		for _, i := range t.Indices {
			indices = append(indices, node(i))
		}
		return map[string]any{"kind": "index", "x": node(t.X), "indices": indices}
	case *ast.UnaryExpr:
		return map[string]any{"kind": "unary", "op": t.Op.String(), "x": node(t.X)}
	case *ast.BinaryExpr:
		return map[string]any{"kind": "binary", "op": t.Op.String(), "x": node(t.X), "y": node(t.Y)}
	case *ast.ParenExpr:
		return node(t.X)
	default:
		return map[string]any{"kind": "unknown", "node": reflect.TypeOf(e).String()}
	}
}
'''
