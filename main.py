"""
Command line entry point for Jira Toolkit.

Usage:
    python main.py query 'project = PROJ AND status = "In Progress"'
    python main.py export 'project = PROJ AND created >= startOfYear()' --output issues.csv
    python main.py analytics 'project = PROJ AND created >= -30d'
    python main.py fields                     # List custom fields
    python main.py projects
    python main.py statuses PROJ
    python main.py issue PROJ-123 --changelog
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from tqdm import tqdm

from jira_toolkit.analytics import analyze_issues, format_stats
from jira_toolkit.client import JiraClient, create_client
from jira_toolkit.config import Config, load_config
from jira_toolkit.exceptions import JiraToolkitError
from jira_toolkit.exporter import (
    DEFAULT_EXPORT_FIELDS,
    DEFAULT_SEARCH_FIELDS,
    export_records,
    to_csv,
)
from jira_toolkit.helpers import (
    get_issue,
    get_issue_changelog,
    get_project_statuses,
    list_custom_fields,
    list_fields,
    list_projects,
    search_issues,
)
from jira_toolkit.transformer import extract_fields, get_path
from jira_toolkit.utils import (
    calculate_file_size,
    parse_jira_datetime,
    setup_logging,
)

logger = logging.getLogger('jira_toolkit.cli')

RULE = '=' * 80


def parse_arguments(argv: Optional[list] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description='Query, export and analyze Jira issues',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Credentials are read from JIRA_HOST, JIRA_EMAIL and JIRA_API_TOKEN
(environment or .env file), overriding config.yaml.
        """
    )

    parser.add_argument(
        '--config',
        type=str,
        help='Path to YAML configuration file (default: ./config.yaml if present)'
    )
    parser.add_argument(
        '--env-file',
        type=str,
        help='Path to .env file (default: nearest .env)'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    query = subparsers.add_parser('query', help='List issues matching a JQL query')
    query.add_argument('jql', help='JQL query string')
    query.add_argument('--fields', help='Comma-separated fields to fetch (default: all)')

    export = subparsers.add_parser('export', help='Export issues to CSV or JSONL')
    export.add_argument('jql', help='JQL query string')
    export.add_argument(
        '--fields',
        nargs='+',
        help='Dotted field paths to export (default: common fields)'
    )
    export.add_argument('--output', help='Output file (default: stdout)')
    export.add_argument(
        '--format',
        choices=['csv', 'jsonl'],
        default='csv',
        help='Output format (default: csv)'
    )

    analytics = subparsers.add_parser('analytics', help='Summarize issues matching a JQL query')
    analytics.add_argument('jql', help='JQL query string')
    analytics.add_argument('--top', type=int, default=10, help='Assignees to list (default: 10)')

    fields = subparsers.add_parser('fields', help='List custom fields')
    fields.add_argument('--all', action='store_true', help='Include system fields')

    subparsers.add_parser('projects', help='List accessible projects')

    statuses = subparsers.add_parser('statuses', help='List statuses of a project')
    statuses.add_argument('project', help='Project key')

    issue = subparsers.add_parser('issue', help='Show a single issue as JSON')
    issue.add_argument('key', help='Issue key (e.g., PROJ-123)')
    issue.add_argument('--changelog', action='store_true', help='Show change history instead')

    return parser.parse_args(argv)


def fetch_with_progress(client: JiraClient, config: Config, jql: str, fields) -> list:
    """Run a paginated search while drawing a progress bar on stderr."""
    with tqdm(desc='Fetching issues', unit='issue', file=sys.stderr) as pbar:

        def on_page(fetched: int, total: int) -> None:
            if total and pbar.total != total:
                pbar.total = total
                pbar.refresh()
            pbar.update(fetched - pbar.n)

        return search_issues(
            client,
            jql,
            fields=fields,
            max_results=config.page_size,
            on_page=on_page
        )


def run_query(client: JiraClient, config: Config, args: argparse.Namespace) -> int:
    issues = fetch_with_progress(client, config, args.jql, args.fields or config.default_fields)

    print(RULE)
    print('QUERY RESULTS:')
    print(RULE)

    for index, issue in enumerate(issues, start=1):
        fields = issue.get('fields') or {}
        created = parse_jira_datetime(fields.get('created'))

        print(f"\n{index}. {issue.get('key')}")
        print(f"   Summary: {fields.get('summary')}")
        print(f"   Status: {get_path(fields, 'status.name') or 'N/A'}")
        print(f"   Assignee: {get_path(fields, 'assignee.displayName') or 'Unassigned'}")
        print(f"   Created: {created.date().isoformat() if created else 'N/A'}")

    print('\n' + RULE)
    print(f"Total: {len(issues)} issues")
    print(RULE + '\n')
    return 0


def run_export(client: JiraClient, config: Config, args: argparse.Namespace) -> int:
    paths = args.fields or DEFAULT_EXPORT_FIELDS

    if args.fields:
        # Only the top-level field of each path is needed from the server
        search_fields = ','.join(dict.fromkeys(path.split('.')[0] for path in paths))
    else:
        search_fields = DEFAULT_SEARCH_FIELDS

    issues = fetch_with_progress(client, config, args.jql, search_fields)
    rows = extract_fields(tqdm(issues, desc='Extracting', file=sys.stderr), paths)

    if not args.output:
        if args.format == 'csv':
            print(to_csv(rows))
        else:
            for row in rows:
                print(json.dumps(row, ensure_ascii=False))
        return 0

    output_file = Path(args.output)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    export_records(rows, str(output_file), args.format)
    logger.info(f"Output written to {output_file} ({calculate_file_size(str(output_file))})")
    return 0


def run_analytics(client: JiraClient, config: Config, args: argparse.Namespace) -> int:
    logger.info('Fetching issues for analysis...')
    issues = fetch_with_progress(
        client,
        config,
        args.jql,
        'status,assignee,priority,issuetype,created'
    )
    print(format_stats(analyze_issues(issues), top_assignees=args.top))
    return 0


def run_fields(client: JiraClient, config: Config, args: argparse.Namespace) -> int:
    logger.info('Fetching fields...')
    fields = list_fields(client) if args.all else list_custom_fields(client)

    print(RULE)
    print('ALL FIELDS' if args.all else 'CUSTOM FIELDS')
    print(RULE)

    for index, field in enumerate(fields, start=1):
        print(f"\n{index}. {field.get('name')}")
        print(f"   ID: {field.get('id')}")
        print(f"   Type: {get_path(field, 'schema.type') or 'N/A'}")
        custom_type = get_path(field, 'schema.custom')
        if custom_type:
            print(f"   Custom Type: {custom_type}")

    print('\n' + RULE)
    print(f"Total fields: {len(fields)}")
    print(RULE + '\n')
    return 0


def run_projects(client: JiraClient, config: Config, args: argparse.Namespace) -> int:
    projects = list_projects(client)
    for project in projects:
        print(f"{project.get('key') or '':<12} {project.get('name')}")
    print(f"\nTotal projects: {len(projects)}")
    return 0


def run_statuses(client: JiraClient, config: Config, args: argparse.Namespace) -> int:
    for issue_type in get_project_statuses(client, args.project):
        names = [status.get('name') for status in issue_type.get('statuses', [])]
        print(f"{issue_type.get('name')}: {', '.join(names)}")
    return 0


def run_issue(client: JiraClient, config: Config, args: argparse.Namespace) -> int:
    if args.changelog:
        data = get_issue_changelog(client, args.key)
    else:
        data = get_issue(client, args.key, config.default_fields)
    print(json.dumps(data, indent=2, ensure_ascii=False))
    return 0


COMMANDS = {
    'query': run_query,
    'export': run_export,
    'analytics': run_analytics,
    'fields': run_fields,
    'projects': run_projects,
    'statuses': run_statuses,
    'issue': run_issue,
}


def main(argv: Optional[list] = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)

    try:
        config = load_config(args.config, args.env_file)

        if args.debug:
            config._config['logging'] = dict(config.get('logging') or {}, level='DEBUG')

        setup_logging(config)
        logger.debug(f"Configuration loaded: {config}")

        with create_client(config) as client:
            exit_code = COMMANDS[args.command](client, config, args)
            logger.debug(f"Request statistics: {client.get_stats()}")
            return exit_code

    except KeyboardInterrupt:
        print('\nInterrupted by user.', file=sys.stderr)
        return 130

    except (JiraToolkitError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
