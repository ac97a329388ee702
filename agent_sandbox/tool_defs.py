# agent_sandbox/tool_defs.py
RISKY_TOOLS = {"write_file", "run_command"}

tools = [
    {
        "type": "function",
        "function": {
            "name": "write_file",
            "description": "Create or overwrite a file with the given content. Use this to create source files, HTML, CSS, configuration files (package.json, vite.config.js, tsconfig.json, pyproject.toml) and any other project files. JSON, JavaScript/TypeScript, Python and TOML content is syntax-checked before it is written.",
            "parameters": {
                "type": "object",
                "properties": {
                    "path": {
                        "type": "string",
                        "description": "The file path relative to the current working directory (e.g., \"src/main.js\", \"index.html\", \"package.json\")",
                    },
                    "content": {
                        "type": "string",
                        "description": "The complete content to write to the file",
                    },
                    "skipValidation": {
                        "type": "boolean",
                        "description": "Set to true only to write content the syntax checker wrongly rejects (default: false)",
                    }
                },
                "required": ["path", "content"]
            },
        }
    },
    {
        "type": "function",
        "function": {
            "name": "read_file",
            "description": "Read the contents of an existing file. Use this before modifying a file to understand its current state.",
            "parameters": {
                "type": "object",
                "properties": {
                    "path": {
                        "type": "string",
                        "description": "The file path relative to the current working directory",
                    }
                },
                "required": ["path"]
            },
        }
    },
    {
        "type": "function",
        "function": {
            "name": "run_command",
            "description": "Execute an allowlisted command such as npm, git, mkdir or grep. Simple pipelines with | are supported; other shell syntax (;, &&, redirections, $(...)) is rejected. The user is asked to confirm every command.",
            "parameters": {
                "type": "object",
                "properties": {
                    "command": {
                        "type": "string",
                        "description": "The command to execute (e.g., \"npm install\", \"mkdir src\", \"grep -r TODO src | wc -l\")",
                    },
                    "cwd": {
                        "type": "string",
                        "description": "Optional working directory for the command, relative to the project (defaults to the project directory)",
                    }
                },
                "required": ["command"]
            },
        }
    },
    {
        "type": "function",
        "function": {
            "name": "list_files",
            "description": "List files and directories in a path. Use this to understand the current project structure. Hidden files, node_modules, __pycache__ and venv are skipped.",
            "parameters": {
                "type": "object",
                "properties": {
                    "path": {
                        "type": "string",
                        "description": "The directory path to list (defaults to the project directory)",
                    },
                    "recursive": {
                        "type": "boolean",
                        "description": "If true, list files recursively (default: false)",
                    }
                },
                "required": []
            },
        }
    },
]
