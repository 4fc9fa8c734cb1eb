"""Shared fixtures for DepBridge tests."""

import pytest


@pytest.fixture
def next_app_corpus():
    """A small Next.js-style repository."""
    return {
        "src/app/page.tsx": (
            'import Header from "@/components/header";\n'
            'import { formatDate, slugify } from "../lib/format";\n'
            'import type { Post } from "@/types/post";\n'
            'import "./globals.css";\n'
            'import { z } from "zod";\n'
            "\n"
            "export default function Page() {\n"
            "  return <Header />;\n"
            "}\n"
        ),
        "src/app/globals.css": '@import "./reset.css";\n',
        "src/app/reset.css": "* { margin: 0; }\n",
        "src/components/header.tsx": (
            'import { slugify } from "@/lib/format";\n'
            'import Logo from "./logo";\n'
            "export default function Header() {}\n"
        ),
        "src/components/logo.tsx": "export const Logo = () => null;\n",
        "src/lib/format.ts": (
            "export function formatDate(d) {}\n"
            "export function slugify(s) {}\n"
        ),
        "src/types/post.ts": "export interface Post { id: string }\n",
        "src/app/blog/page.tsx": (
            'import { formatDate } from "@/lib/format";\n'
            'import Header from "../../components/header";\n'
        ),
        "README.md": "# demo\n",
    }
