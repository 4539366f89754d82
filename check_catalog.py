from pathlib import Path

from attestation.services.catalog import CatalogError, clean_line, load_catalog
from attestation.services.config import get_settings


def tidy(path: Path) -> None:
    """Trim lines, drop blank ones and trailing `},` commas, rewrite in place."""
    lines = path.read_text(encoding="utf-8").splitlines()

    blank = []
    cleaned = []
    for i, line in enumerate(lines, 1):
        fixed = clean_line(line)
        if not fixed:
            blank.append(i)
            continue
        if fixed != line:
            print(f"⚠️ {path.name}:{i}: whitespace / trailing comma fixed")
        cleaned.append(fixed)

    if blank:
        print(f"🚫 {path.name}: blank lines removed: {blank}")

    path.write_text("\n".join(cleaned) + "\n", encoding="utf-8")


def main() -> int:
    settings = get_settings()
    for p in (settings.topics_path, settings.questions_path):
        tidy(Path(p))

    try:
        catalog = load_catalog(settings.topics_path, settings.questions_path)
    except CatalogError as e:
        print(f"❌ {e}")
        return 1

    for topic in catalog:
        print(f"- {topic.id}: {topic.title} ({len(topic.questions)} questions)")
    print(f"✅ {catalog.count} topics OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
