"""
Inkwell Template Introspection.

This module contains the TemplateInspector, which walks parsed template nodes
and reports their structure (blocks, definitions, includes, variables and
expressions) for analysis and tooling.
"""

from inkcore.nodes import NodeKind


class TemplateInspector:
    """
    Extracts structural information from parsed templates.

    Unlike the compiler, the inspector does not resolve overrides or compile
    expressions; it only records what each file declares.
    """

    def inspect(self, nodes):
        """Summarize one file's nodes."""
        report = {
            "blocks": [],
            "definitions": [],
            "includes": [],
            "variables": [],
            "expressions": [],
        }
        self._walk(nodes, report)
        return report

    def inspect_job(self, job):
        """Summarize every file a compiled Job loaded, keyed by resolved path."""
        return {path: self.inspect(nodes) for path, nodes in job.cached_nodes.items()}

    def _walk(self, nodes, report):
        for node in nodes:
            kind = NodeKind(node.kind)
            if kind == NodeKind.BLOCK:
                report["blocks"].append(node.name)
                self._walk(node.body, report)
            elif kind == NodeKind.DEF:
                report["definitions"].append({"name": node.name, "mode": node.mode.value})
                self._walk(node.body, report)
            elif kind == NodeKind.INCLUDE:
                report["includes"].append({
                    "file": node.file,
                    "overrides": [d.name for d in node.overrides],
                })
                self._walk(node.overrides, report)
            elif kind == NodeKind.VAR:
                report["variables"].append(node.name)
                report["expressions"].append(node.source)
            elif kind == NodeKind.EXPR:
                report["expressions"].append(node.source)
