import argparse
import asyncio
import json
import os
import sys

from compiler import Compiler, Job, set_verbose
from inkcore.config import load_config
from inkcore.errors import TemplateError
from inkcore.introspection import TemplateInspector
from inkcore.runtime import Runtime, to_text


def log(message):
    """Log informational messages to stderr."""
    print(f"\033[92m\033[1mINFO:\033[0m {message}", file=sys.stderr)


def fail(message):
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def make_compiler(args):
    try:
        config = load_config()
    except ValueError as e:
        fail(str(e))
    basedir = args.basedir or config.basedir or os.getcwd()
    runtime = Runtime() if config.escape else Runtime(escape=to_text)
    return Compiler(basedir=basedir, runtime=runtime, encoding=config.encoding)


def build(args):
    set_verbose(args.verbose)
    compiler = make_compiler(args)
    job = Job(compiler, args.filename)
    try:
        renderer = asyncio.run(job.compile())
    except TemplateError as e:
        fail(f"Compilation Failed:{e}")
    return job, renderer


def load_bindings(path):
    if not path:
        return {}
    try:
        if path == "-":
            data = json.load(sys.stdin)
        else:
            if not os.path.exists(path):
                fail(f"Data file '{path}' not found.")
            with open(path, 'r') as f:
                data = json.load(f)
    except json.JSONDecodeError as e:
        fail(f"Data file '{path}' is not valid JSON: {e}")
    if not isinstance(data, dict):
        fail(f"Data file '{path}' must contain a JSON object.")
    return data


def cmd_render(args):
    bindings = load_bindings(args.data)
    _, renderer = build(args)
    output = renderer(bindings)
    if args.output:
        with open(args.output, 'w') as f:
            f.write(output)
        log(f"Rendered {args.filename} -> {args.output}")
    else:
        sys.stdout.write(output)


def cmd_check(args):
    job, _ = build(args)
    log(f"✓ {args.filename}: {len(job.cached_nodes)} file(s), {len(job.expressions)} expression(s)")


def cmd_dump(args):
    _, renderer = build(args)
    print(renderer.dump())


def cmd_analyse(args):
    """Report the structure of a template and everything it includes."""
    job, _ = build(args)
    report = {
        "filename": args.filename,
        "files": TemplateInspector().inspect_job(job),
        "expression_count": len(job.expressions),
    }

    print("\n" + "=" * 60)
    print("           INKWELL ANALYSIS REPORT")
    print("=" * 60 + "\n")
    for path, info in report["files"].items():
        print(f"📄 {path}")
        if info["blocks"]:
            print(f"   blocks:      {', '.join(info['blocks'])}")
        if info["definitions"]:
            defs = ", ".join(f"{d['name']} ({d['mode']})" for d in info["definitions"])
            print(f"   definitions: {defs}")
        if info["includes"]:
            print(f"   includes:    {', '.join(i['file'] for i in info['includes'])}")
        if info["variables"]:
            print(f"   variables:   {', '.join(info['variables'])}")
        print(f"   expressions: {len(info['expressions'])}")
        print()

    if args.save_report:
        with open(args.save_report, 'w') as f:
            json.dump(report, f, indent=2)
        log(f"📁 Report saved to {args.save_report}")


def cmd_init(args):
    log("Initializing project...")
    with open("layout.html", "w") as f:
        f.write(
            '<html>\n<head><title>{% block title %}Untitled{% endblock %}</title></head>\n'
            '<body>\n{% block content %}{% endblock %}\n</body>\n</html>\n'
        )
    with open("page.html", "w") as f:
        f.write(
            '{% include "layout.html" with %}\n'
            '  {% def title %}{{ title }}{% enddef %}\n'
            '  {% def content %}<h1>Hello, {{ name | default:"world" }}!</h1>{% enddef %}\n'
            '{% endinclude %}\n'
        )
    log("Created layout.html and page.html")


def main():
    parser = argparse.ArgumentParser(description="Inkwell CLI")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output (sent to stderr)")
    parser.add_argument("--basedir", help="Base directory for template paths (default: current directory)")
    subparsers = parser.add_subparsers(dest="command")

    render = subparsers.add_parser("render", help="Render a template")
    render.add_argument("filename")
    render.add_argument("--data", help="JSON file with bindings ('-' for stdin)")
    render.add_argument("--output", help="Write output to file instead of stdout")

    subparsers.add_parser("check", help="Compile a template and report errors").add_argument("filename")
    subparsers.add_parser("dump", help="Print the compiled program").add_argument("filename")

    analyse = subparsers.add_parser("analyse", help="Report template structure")
    analyse.add_argument("filename")
    analyse.add_argument("--save-report", help="Save analysis report as JSON to file")

    subparsers.add_parser("init", help="Create example templates")

    args = parser.parse_args()

    if args.command == "render": cmd_render(args)
    elif args.command == "check": cmd_check(args)
    elif args.command == "dump": cmd_dump(args)
    elif args.command == "analyse": cmd_analyse(args)
    elif args.command == "init": cmd_init(args)
    else: parser.print_help()


if __name__ == "__main__":
    main()
