"""
PDF Fusion - Unified Entry Point

This script starts the PDF Fusion window. When packaged as an executable,
a single EXE can open any tab directly:
- Merge tab (default, no arguments)
- Any tab (with --tool <tabname> argument)

Copyright 2025-2026 Andre Lorbach

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import sys
import os
import traceback
import tkinter as tk
from tkinter import messagebox
from pathlib import Path

# Handle both script mode and executable mode (PyInstaller)
if getattr(sys, 'frozen', False):
    # Running as compiled executable; modules are bundled by PyInstaller
    _script_dir = Path(sys.executable).parent
    _src_dir = _script_dir
else:
    _script_dir = Path(__file__).parent
    _src_dir = _script_dir / "src"
    if _src_dir.exists():
        sys.path.insert(0, str(_src_dir))

# Tool name to tab mapping (aliases included)
TOOL_TABS = {
    "merge": "merge",
    "pdf_merge": "merge",
    "restructure": "restructure",
    "nup": "restructure",
    "merge_restructure": "merge_restructure",
    "merge_and_restructure": "merge_restructure",
}


def resolve_tool(tool_name):
    """Normalize a --tool argument to a tab name, or None if unknown."""
    return TOOL_TABS.get(tool_name.lower().replace("-", "_"))


def print_help():
    print("PDF Fusion - Unified Entry Point")
    print()
    print("Usage:")
    print("  PDF_Fusion.exe                    # Open the merge tab (default)")
    print("  PDF_Fusion.exe --tool <toolname>  # Open a specific tab")
    print("  PDF_Fusion.exe --debug            # Enable debug logging")
    print()
    print("Available tools:")
    for tool in sorted(set(TOOL_TABS.values())):
        print(f"  - {tool}")


def main(argv=None):
    """Main entry point - route to the requested tab"""
    argv = list(sys.argv[1:] if argv is None else argv)
    try:
        if getattr(sys, 'frozen', False):
            os.chdir(_script_dir)

        if argv and argv[0] in ("-h", "--help"):
            print_help()
            return 0

        tool_args = []
        if "--tool" in argv:
            position = argv.index("--tool")
            if position + 1 >= len(argv):
                print("[ERROR] --tool requires a tool name")
                print_help()
                return 1
            tab = resolve_tool(argv[position + 1])
            if tab is None:
                print(f"[ERROR] Unknown tool: {argv[position + 1]}")
                print(f"[INFO] Available tools: {', '.join(sorted(set(TOOL_TABS.values())))}")
                return 1
            tool_args = ["--tool", tab]
            del argv[position:position + 2]

        extra = [arg for arg in argv if arg != "--debug"]
        if extra:
            print(f"[WARNING] Unknown argument(s): {' '.join(extra)}")
            print("[INFO] Use --help for usage information")
        if "--debug" in argv:
            tool_args.append("--debug")

        from pdf_fusion import main as fusion_main
        fusion_main(tool_args)
        return 0

    except Exception as e:
        print(f"""
[ERROR] Failed to start PDF Fusion

Error: {e}

Traceback:
{traceback.format_exc()}

Please report this error with the above information.
""")
        try:
            root = tk.Tk()
            root.withdraw()
            messagebox.showerror("PDF Fusion - Startup Error",
                                 f"Failed to start application:\n\n{e}\n\n"
                                 "Check console output for details.")
            root.destroy()
        except tk.TclError as dialog_error:
            print(f"[WARNING] Could not show error dialog: {dialog_error}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
