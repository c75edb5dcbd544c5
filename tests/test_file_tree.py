import unittest

from code_assist_gateway.domain.entities import FileEntry, FolderEntry
from code_assist_gateway.services.file_tree import (
    NO_FILES,
    format_file_tree,
    is_ignored_file,
)


class TestFileTree(unittest.TestCase):
    def test_missing_input(self) -> None:
        self.assertEqual(format_file_tree(None), NO_FILES)
        self.assertEqual(format_file_tree("not a tree"), NO_FILES)  # type: ignore[arg-type]

    def test_empty_input(self) -> None:
        self.assertEqual(format_file_tree([]), "")

    def test_folders_before_files(self) -> None:
        tree = [
            FileEntry("b.ts"),
            FolderEntry("src", (FileEntry("index.ts"), FolderEntry("lib"))),
            FileEntry("a.ts"),
            FolderEntry("app"),
        ]
        self.assertEqual(
            format_file_tree(tree),
            "\n".join(
                [
                    "├── app/",
                    "├── src/",
                    "│   ├── lib/",
                    "│   ├── index.ts",
                    "├── a.ts",
                    "├── b.ts",
                ]
            ),
        )

    def test_name_ordering_is_case_sensitive(self) -> None:
        tree = [FileEntry("b.ts"), FileEntry("B.ts"), FileEntry("a.ts")]
        self.assertEqual(
            format_file_tree(tree).splitlines(),
            ["├── B.ts", "├── a.ts", "├── b.ts"],
        )

    def test_ignored_entries_are_dropped(self) -> None:
        tree = [
            FolderEntry("node_modules", (FileEntry("react.js"),)),
            FolderEntry("src", (FileEntry("logo.png"), FileEntry("app.tsx"))),
            FileEntry("package-lock.json"),
            FileEntry("debug.log"),
            FileEntry("package.json"),
        ]
        output = format_file_tree(tree)
        self.assertNotIn("node_modules", output)
        self.assertNotIn("react.js", output)
        self.assertNotIn("logo.png", output)
        self.assertNotIn("package-lock.json", output)
        self.assertNotIn("debug.log", output)
        self.assertIn("│   ├── app.tsx", output)
        self.assertIn("├── package.json", output)

    def test_fully_filtered_input(self) -> None:
        tree = [FolderEntry(".git", (FileEntry("HEAD"),)), FileEntry("yarn.lock")]
        self.assertEqual(format_file_tree(tree), "")

    def test_custom_ignore_rules(self) -> None:
        tree = [FolderEntry("docs"), FileEntry("notes.txt"), FileEntry("main.py")]
        output = format_file_tree(tree, ignored_files={"*.txt"}, ignored_folders={"docs"})
        self.assertEqual(output, "├── main.py")

    def test_prefix_is_applied(self) -> None:
        self.assertEqual(format_file_tree([FileEntry("x.py")], "    "), "    ├── x.py")

    def test_is_ignored_file(self) -> None:
        self.assertTrue(is_ignored_file("error.log"))
        self.assertTrue(is_ignored_file(".env"))
        self.assertFalse(is_ignored_file("logger.ts"))
        self.assertFalse(is_ignored_file("environment.ts"))


if __name__ == "__main__":
    unittest.main()
