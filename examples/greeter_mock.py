from __future__ import annotations

from pathlib import Path

import ridicule


def main() -> None:
    # Requirements:
    # - Go toolchain on PATH (the source is parsed with go/parser via `go run`)
    # - gofmt on PATH for formatted output (optional; unformatted output is still valid Go)
    #
    # Equivalent CLI: ridicule --in greeter.go
    src = Path("greeter.go")
    src.write_text(
        "\n".join(
            [
                "package greeter",
                "",
                'import "context"',
                "",
                "type Greeter interface {",
                "    Greet(ctx context.Context, name string) (string, error)",
                "}",
                "",
            ]
        ),
        encoding="utf-8",
    )

    out = ridicule.generate_mock(source=src, opts=ridicule.MockgenOptions(banner=False))
    print(out.read_text(encoding="utf-8"))


if __name__ == "__main__":
    main()
