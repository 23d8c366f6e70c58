"""Wheel build hook that packs the templates/ tree into the embedded dataset."""

import importlib.util
import shutil
import tempfile
from pathlib import Path

from hatchling.builders.hooks.plugin.interface import BuildHookInterface

DATASET_MODULE = Path("codekit") / "catalog" / "dataset.py"
TEMPLATES_DIR = Path("codekit") / "templates"
DATASET_TARGET = "codekit/_templates.json"


def embed_catalog(project_root: Path, dest: Path) -> int:
    """Write the embedded dataset for the package's templates to dest.

    The dataset module is loaded from its file so the build does not need
    the package's runtime dependencies.

    Returns:
        Number of embedded files
    """
    spec = importlib.util.spec_from_file_location("codekit_dataset", project_root / DATASET_MODULE)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module.write_embedded_dataset(project_root / TEMPLATES_DIR, dest)


class CatalogBuildHook(BuildHookInterface):
    PLUGIN_NAME = "custom"

    def initialize(self, version, build_data):
        if version == "editable":
            return
        self._tmp_dir = Path(tempfile.mkdtemp(prefix="codekit-build-"))
        dest = self._tmp_dir / "_templates.json"
        count = embed_catalog(Path(self.root), dest)
        self.app.display_info(f"Embedded {count} catalog files in {DATASET_TARGET}")
        build_data["force_include"][str(dest)] = DATASET_TARGET

    def finalize(self, version, build_data, artifact_path):
        tmp_dir = getattr(self, "_tmp_dir", None)
        if tmp_dir is not None:
            shutil.rmtree(tmp_dir, ignore_errors=True)
