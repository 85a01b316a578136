from typing import List, Dict, Any

_REPO_PATH = {"type": "string", "description": "Path to the git repository"}
_DB_TYPE = {"type": "string", "enum": ["postgres", "mysql"], "description": "Database type"}
_HTTP_METHOD = {
    "type": "string",
    "enum": ["GET", "POST", "PUT", "PATCH", "DELETE"],
    "description": "HTTP method",
}

GIT_TOOLS: List[Dict[str, Any]] = [
    {
        "name": "git_status",
        "description": "Get the current git status of the repository",
        "inputSchema": {
            "type": "object",
            "properties": {"repoPath": _REPO_PATH},
            "required": ["repoPath"]
        }
    },
    {
        "name": "git_log",
        "description": "Get git commit history",
        "inputSchema": {
            "type": "object",
            "properties": {
                "repoPath": _REPO_PATH,
                "limit": {"type": "number", "description": "Number of commits to retrieve (default: 10)"},
                "branch": {"type": "string", "description": "Branch name (optional)"}
            },
            "required": ["repoPath"]
        }
    },
    {
        "name": "git_diff",
        "description": "Get git diff for staged/unstaged changes or between commits",
        "inputSchema": {
            "type": "object",
            "properties": {
                "repoPath": _REPO_PATH,
                "staged": {"type": "boolean", "description": "Show staged changes (default: false)"},
                "file": {"type": "string", "description": "Specific file to diff (optional)"},
                "commit1": {"type": "string", "description": "First commit hash for comparison (optional)"},
                "commit2": {"type": "string", "description": "Second commit hash for comparison (optional)"}
            },
            "required": ["repoPath"]
        }
    },
    {
        "name": "git_branches",
        "description": "List all branches in the repository",
        "inputSchema": {
            "type": "object",
            "properties": {
                "repoPath": _REPO_PATH,
                "remote": {"type": "boolean", "description": "Include remote branches (default: false)"}
            },
            "required": ["repoPath"]
        }
    },
    {
        "name": "generate_commit_message",
        "description": "Generate a commit message based on staged changes",
        "inputSchema": {
            "type": "object",
            "properties": {"repoPath": _REPO_PATH},
            "required": ["repoPath"]
        }
    },
    {
        "name": "git_blame",
        "description": "Show what revision and author last modified each line of a file",
        "inputSchema": {
            "type": "object",
            "properties": {
                "repoPath": _REPO_PATH,
                "file": {"type": "string", "description": "File path relative to repo root"}
            },
            "required": ["repoPath", "file"]
        }
    },
    {
        "name": "git_search_commits",
        "description": "Search commits by message, author, or content",
        "inputSchema": {
            "type": "object",
            "properties": {
                "repoPath": _REPO_PATH,
                "query": {"type": "string", "description": "Search query"},
                "searchType": {
                    "type": "string",
                    "enum": ["message", "author", "content"],
                    "description": "Type of search to perform"
                }
            },
            "required": ["repoPath", "query", "searchType"]
        }
    },
    {
        "name": "git_stage",
        "description": "Stage files for the next commit.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "repoPath": _REPO_PATH,
                "files": {
                    "type": "array",
                    "description": "An array of file paths to stage. If empty or not provided, all changes will be staged.",
                    "items": {"type": "string"}
                }
            },
            "required": ["repoPath"]
        }
    },
    {
        "name": "git_commit",
        "description": "Commit staged changes with a provided message.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "repoPath": _REPO_PATH,
                "message": {"type": "string", "description": "The commit message."}
            },
            "required": ["repoPath", "message"]
        }
    },
    {
        "name": "git_push",
        "description": "Push committed changes to a remote repository.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "repoPath": _REPO_PATH,
                "remote": {"type": "string", "description": "The remote to push to (default: 'origin')."},
                "branch": {"type": "string", "description": "The branch to push (default: current branch)."},
                "force": {"type": "boolean", "description": "Force push (use with caution). Default: false."}
            },
            "required": ["repoPath"]
        }
    },
]

DEVTOOLS_TOOLS: List[Dict[str, Any]] = [
    {
        "name": "docker_ps",
        "description": "List Docker containers (running or all)",
        "inputSchema": {
            "type": "object",
            "properties": {
                "all": {"type": "boolean", "description": "Show all containers (default: false, only running)"}
            }
        }
    },
    {
        "name": "docker_logs",
        "description": "Get logs from a Docker container",
        "inputSchema": {
            "type": "object",
            "properties": {
                "container": {"type": "string", "description": "Container name or ID"},
                "tail": {"type": "number", "description": "Number of lines to show from the end (default: 100)"},
                "follow": {
                    "type": "boolean",
                    "description": "Follow log output for a short capture window (default: false)"
                }
            },
            "required": ["container"]
        }
    },
    {
        "name": "docker_exec",
        "description": "Execute a command in a running Docker container",
        "inputSchema": {
            "type": "object",
            "properties": {
                "container": {"type": "string", "description": "Container name or ID"},
                "command": {"type": "string", "description": "Command to execute"}
            },
            "required": ["container", "command"]
        }
    },
    {
        "name": "docker_compose",
        "description": "Run Docker Compose commands",
        "inputSchema": {
            "type": "object",
            "properties": {
                "action": {
                    "type": "string",
                    "enum": ["up", "down", "restart", "ps", "logs"],
                    "description": "Docker Compose action"
                },
                "projectPath": {"type": "string", "description": "Path to docker-compose.yml directory"},
                "service": {"type": "string", "description": "Specific service name (optional)"}
            },
            "required": ["action", "projectPath"]
        }
    },
    {
        "name": "docker_stats",
        "description": "Get resource usage statistics for containers",
        "inputSchema": {
            "type": "object",
            "properties": {
                "container": {
                    "type": "string",
                    "description": "Container name or ID (optional, all if not specified)"
                }
            }
        }
    },
    {
        "name": "run_command",
        "description": "Run a shell command (use with caution)",
        "inputSchema": {
            "type": "object",
            "properties": {
                "command": {"type": "string", "description": "Shell command to execute"},
                "workingDir": {"type": "string", "description": "Working directory (optional)"}
            },
            "required": ["command"]
        }
    },
    {
        "name": "monitor_logs",
        "description": "Show the most recent lines of a log file",
        "inputSchema": {
            "type": "object",
            "properties": {
                "logPath": {"type": "string", "description": "Path to log file"},
                "lines": {"type": "number", "description": "Number of recent lines to show (default: 50)"}
            },
            "required": ["logPath"]
        }
    },
    {
        "name": "check_ports",
        "description": "Check which processes are using specific ports",
        "inputSchema": {
            "type": "object",
            "properties": {
                "port": {"type": "number", "description": "Port number to check"}
            },
            "required": ["port"]
        }
    },
    {
        "name": "npm_scripts",
        "description": "List and run npm scripts from package.json",
        "inputSchema": {
            "type": "object",
            "properties": {
                "projectPath": {"type": "string", "description": "Path to project directory"},
                "action": {
                    "type": "string",
                    "enum": ["list", "run"],
                    "description": "List scripts or run a specific script"
                },
                "scriptName": {
                    "type": "string",
                    "description": "Script name to run (required if action is 'run')"
                }
            },
            "required": ["projectPath", "action"]
        }
    },
]

API_TESTING_TOOLS: List[Dict[str, Any]] = [
    {
        "name": "http_request",
        "description": "Make an HTTP request to test APIs",
        "inputSchema": {
            "type": "object",
            "properties": {
                "method": _HTTP_METHOD,
                "url": {"type": "string", "description": "Full URL including protocol"},
                "headers": {"type": "object", "description": "Request headers (optional)"},
                "body": {"type": "string", "description": "Request body as JSON string (optional)"},
                "timeout": {"type": "number", "description": "Request timeout in milliseconds (default: 30000)"}
            },
            "required": ["method", "url"]
        }
    },
    {
        "name": "test_endpoint",
        "description": "Test an API endpoint with multiple scenarios",
        "inputSchema": {
            "type": "object",
            "properties": {
                "baseUrl": {"type": "string", "description": "Base URL of the API"},
                "endpoint": {"type": "string", "description": "Endpoint path (e.g., /api/users)"},
                "tests": {
                    "type": "array",
                    "description": "Array of test scenarios",
                    "items": {
                        "type": "object",
                        "properties": {
                            "name": {"type": "string", "description": "Test name"},
                            "method": {"type": "string", "description": "HTTP method"},
                            "body": {"description": "Request body (object or JSON string)"},
                            "expectedStatus": {"type": "number", "description": "Expected status code"}
                        }
                    }
                }
            },
            "required": ["baseUrl", "endpoint", "tests"]
        }
    },
    {
        "name": "generate_test_cases",
        "description": "Generate test cases for an API endpoint based on OpenAPI/Swagger spec",
        "inputSchema": {
            "type": "object",
            "properties": {
                "method": {"type": "string", "description": "HTTP method"},
                "endpoint": {"type": "string", "description": "Endpoint path"},
                "requestSchema": {"type": "object", "description": "Request body JSON schema"},
                "responseSchema": {"type": "object", "description": "Response body JSON schema"}
            },
            "required": ["method", "endpoint"]
        }
    },
    {
        "name": "performance_test",
        "description": "Run a simple performance test on an endpoint",
        "inputSchema": {
            "type": "object",
            "properties": {
                "url": {"type": "string", "description": "Full URL to test"},
                "method": _HTTP_METHOD,
                "requests": {"type": "number", "description": "Number of requests to make (default: 10)"},
                "body": {"type": "string", "description": "Request body (optional)"}
            },
            "required": ["url", "method"]
        }
    },
    {
        "name": "validate_response",
        "description": "Validate API response against expected schema",
        "inputSchema": {
            "type": "object",
            "properties": {
                "response": {"description": "API response to validate (any JSON value)"},
                "schema": {"type": "object", "description": "JSON schema to validate against"}
            },
            "required": ["response", "schema"]
        }
    },
]

DATABASE_TOOLS: List[Dict[str, Any]] = [
    {
        "name": "execute_query",
        "description": "Execute a SQL query on PostgreSQL or MySQL database",
        "inputSchema": {
            "type": "object",
            "properties": {
                "dbType": _DB_TYPE,
                "query": {"type": "string", "description": "SQL query to execute"}
            },
            "required": ["dbType", "query"]
        }
    },
    {
        "name": "get_schema",
        "description": "Get database schema information (tables, columns, types)",
        "inputSchema": {
            "type": "object",
            "properties": {
                "dbType": _DB_TYPE,
                "tableName": {"type": "string", "description": "Specific table name (optional)"}
            },
            "required": ["dbType"]
        }
    },
    {
        "name": "get_table_stats",
        "description": "Get statistics about tables (row count, size, etc.)",
        "inputSchema": {
            "type": "object",
            "properties": {"dbType": _DB_TYPE},
            "required": ["dbType"]
        }
    },
    {
        "name": "generate_migration",
        "description": "Generate a migration script based on schema differences",
        "inputSchema": {
            "type": "object",
            "properties": {
                "dbType": _DB_TYPE,
                "description": {"type": "string", "description": "Description of the migration"}
            },
            "required": ["dbType", "description"]
        }
    },
]
