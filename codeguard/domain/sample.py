"""Built-in sample review shown in sample mode.

The sample is an agent payload, not a prebuilt result, so it goes
through the same normalizer as a live response.
"""

from __future__ import annotations

import copy

from codeguard.domain.models import ReviewResult
from codeguard.normalizers.review_normalizer import normalize

SAMPLE_LANGUAGE = "JavaScript/TypeScript"

SAMPLE_CODE = """\
const express = require('express');
const db = require('./db');
const _ = require('lodash');

const API_SECRET = 'sk-abc123-super-secret-key';

app.post('/register', async (req, res) => {
  const { email, password } = req.body;
  const result = await db.query(
    "INSERT INTO users (email, password) VALUES ('" + email + "', '" + password + "')"
  );
  res.json({ success: true, userId: result.id });
});

app.get('/orders', async (req, res) => {
  const orders = await db.query('SELECT * FROM orders');
  const enriched = [];
  for (const order of orders) {
    const user = await db.query('SELECT * FROM users WHERE id = ' + order.user_id);
    enriched.push({ ...order, user_name: user[0].name });
  }
  res.json(enriched);
});"""

SAMPLE_FIXED_CODE = """\
const express = require('express');
const db = require('./db');

const API_SECRET = process.env.API_SECRET;
if (!API_SECRET) throw new Error('API_SECRET env var required');

app.post('/register', async (req, res) => {
  try {
    const { email, password } = req.body;
    const result = await db.query(
      'INSERT INTO users (email, password) VALUES ($1, $2) RETURNING id',
      [email, password]
    );
    res.json({ success: true, userId: result.id });
  } catch (err) {
    console.error('DB error:', err);
    res.status(500).json({ error: 'Internal server error' });
  }
});

app.get('/orders', async (req, res) => {
  const orders = await db.query('SELECT * FROM orders');
  const userIds = orders.map((o) => o.user_id);
  const users = await db.query('SELECT * FROM users WHERE id = ANY($1)', [userIds]);
  const userMap = new Map(users.map((u) => [u.id, u]));
  res.json(orders.map((order) => ({ ...order, userName: userMap.get(order.user_id)?.name })));
});"""

SAMPLE_PAYLOAD: dict = {
    "overall_score": 52,
    "fixed_score": 88,
    "summary": (
        "The code has several security vulnerabilities including SQL injection risks and "
        "hardcoded credentials. Performance can be improved by optimizing database queries "
        "and adding caching. Multiple style violations were detected in naming conventions "
        "and error handling."
    ),
    "language_detected": SAMPLE_LANGUAGE,
    "fixed_code": SAMPLE_FIXED_CODE,
    "security_issues": [
        {
            "title": "SQL Injection Vulnerability",
            "severity": "Critical",
            "description": "User input is directly concatenated into SQL query string on line 45 "
            "without parameterization or sanitization.",
            "line_reference": "Line 45",
            "fix_suggestion": 'const result = await db.query("SELECT * FROM users WHERE id = $1", [userId]);',
        },
        {
            "title": "Hardcoded API Secret",
            "severity": "High",
            "description": "API secret key is hardcoded in the source file. This exposes sensitive "
            "credentials if the code is committed to version control.",
            "line_reference": "Line 12",
            "fix_suggestion": "const API_SECRET = process.env.API_SECRET;\n"
            'if (!API_SECRET) throw new Error("API_SECRET env var required");',
        },
        {
            "title": "Missing Input Validation",
            "severity": "Medium",
            "description": "The email parameter in the registration handler is not validated for "
            "format or length before being stored.",
            "line_reference": "Line 78",
            "fix_suggestion": 'import { z } from "zod";\n'
            "const emailSchema = z.string().email().max(255);\n"
            "const validEmail = emailSchema.parse(req.body.email);",
        },
    ],
    "performance_issues": [
        {
            "title": "N+1 Database Query",
            "severity": "High",
            "impact": "High",
            "description": "Fetching user details inside a loop causes N+1 query problem. Each "
            "iteration triggers a separate database call.",
            "line_reference": "Lines 60-68",
            "fix_suggestion": "const userIds = orders.map(o => o.userId);\n"
            'const users = await db.query("SELECT * FROM users WHERE id = ANY($1)", [userIds]);',
        },
        {
            "title": "Unoptimized Array Search",
            "severity": "Medium",
            "impact": "Medium",
            "description": "Using Array.find() inside a nested loop creates O(n*m) complexity when "
            "a Map lookup would be O(n+m).",
            "line_reference": "Line 92",
            "fix_suggestion": "const userMap = new Map(users.map(u => [u.id, u]));\n"
            "const user = userMap.get(order.userId);",
        },
    ],
    "style_issues": [
        {
            "title": "Inconsistent Naming Convention",
            "category": "naming",
            "description": "Mix of camelCase and snake_case variable names. The project should use "
            "a consistent naming convention.",
            "line_reference": "Lines 15, 32, 48",
            "fix_suggestion": "Rename user_name to userName, api_key to apiKey for consistency "
            "with JavaScript conventions.",
        },
        {
            "title": "Missing Error Handling",
            "category": "error-handling",
            "description": "The async database call has no try-catch block and no error response "
            "to the client.",
            "line_reference": "Line 55",
            "fix_suggestion": "try {\n  const result = await db.query(...);\n  res.json(result);\n"
            '} catch (err) {\n  console.error("DB error:", err);\n'
            '  res.status(500).json({ error: "Internal server error" });\n}',
        },
        {
            "title": "Unused Import",
            "category": "imports",
            "description": 'The "lodash" module is imported but never used in the file. This adds '
            "unnecessary bundle size.",
            "line_reference": "Line 3",
            "fix_suggestion": 'Remove the unused import: // import _ from "lodash"',
        },
    ],
    "fix_changelog": [
        {
            "change_type": "security",
            "title": "Parameterized SQL queries",
            "description": "Replaced string concatenation with bound parameters.",
            "before_snippet": "\"INSERT INTO users (email, password) VALUES ('\" + email + \"', ...\"",
            "after_snippet": "'INSERT INTO users (email, password) VALUES ($1, $2) RETURNING id'",
        },
        {
            "change_type": "security",
            "title": "Secret moved to environment",
            "description": "The API secret is read from the environment and required at startup.",
            "before_snippet": "const API_SECRET = 'sk-abc123-super-secret-key';",
            "after_snippet": "const API_SECRET = process.env.API_SECRET;",
        },
        {
            "change_type": "performance",
            "title": "Batched user lookup",
            "description": "One query for all users plus a Map lookup replaces the per-order query.",
            "before_snippet": "for (const order of orders) { await db.query(...) }",
            "after_snippet": "const userMap = new Map(users.map((u) => [u.id, u]));",
        },
        {
            "change_type": "style",
            "title": "Removed unused import",
            "description": "Dropped the unused lodash require.",
            "before_snippet": "const _ = require('lodash');",
            "after_snippet": "",
        },
    ],
    "issue_counts": {
        "security_total": 3,
        "security_critical": 1,
        "security_high": 1,
        "security_medium": 1,
        "security_low": 0,
        "performance_total": 2,
        "performance_high": 1,
        "performance_medium": 1,
        "performance_low": 0,
        "style_total": 3,
    },
    "top_priorities": [
        {
            "rank": 1,
            "title": "SQL Injection Vulnerability",
            "category": "security",
            "reason": "Critical security flaw that can allow attackers to access or modify the "
            "entire database.",
        },
        {
            "rank": 2,
            "title": "Hardcoded API Secret",
            "category": "security",
            "reason": "Exposed credentials can be exploited if the repository becomes public or is shared.",
        },
        {
            "rank": 3,
            "title": "N+1 Database Query",
            "category": "performance",
            "reason": "Causes severe performance degradation as data grows, resulting in hundreds "
            "of unnecessary queries.",
        },
    ],
}


def sample_result() -> ReviewResult:
    """Fresh normalized sample; deep-equal across calls."""
    return normalize(copy.deepcopy(SAMPLE_PAYLOAD), SAMPLE_LANGUAGE)
