from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from analytics.sink import get_analytics_sink

MIGRATIONS_DIR = Path(__file__).resolve().parents[2] / "clickhouse"


def split_statements(sql):
    return [statement.strip() for statement in sql.split(";") if statement.strip()]


class Command(BaseCommand):
    help = "Create the ClickHouse analytics tables."

    def add_arguments(self, parser):
        parser.add_argument("--dir", default=str(MIGRATIONS_DIR))

    def handle(self, *args, **options):
        directory = Path(options["dir"])
        if not directory.is_dir():
            raise CommandError(f"Migrations directory not found: {directory}")

        files = sorted(directory.glob("*.sql"))
        if not files:
            self.stdout.write(self.style.WARNING("No migration files found"))
            return

        sink = get_analytics_sink()
        for path in files:
            self.stdout.write(f"Running migration: {path.name}")
            for statement in split_statements(path.read_text(encoding="utf-8")):
                sink.command(statement)
            self.stdout.write(self.style.SUCCESS(f"Migration completed: {path.name}"))
