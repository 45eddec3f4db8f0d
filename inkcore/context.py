"""
Compile-time scope used while walking template nodes.

One Context exists per file-compilation level: the root file and every include.
Definitions registered in a context are visible to blocks compiled in that
context and in every context nested below it.
"""
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from inkcore.nodes import Mode
from inkcore.program import Fragment


class CompiledDefinition(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    mode: Mode = Mode.OVERRIDE
    code: Fragment = ()


class Context(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    current_file: str
    definitions: Dict[str, CompiledDefinition] = Field(default_factory=dict)
    parent: Optional["Context"] = None

    def nested(self, current_file):
        """Open a context for an include compiled from this one."""
        return Context(current_file=current_file, parent=self)

    def find_definition(self, name):
        """Nearest enclosing definition for name, or None."""
        ctx = self
        while ctx is not None:
            found = ctx.definitions.get(name)
            if found is not None:
                return found
            ctx = ctx.parent
        return None


Context.model_rebuild()
