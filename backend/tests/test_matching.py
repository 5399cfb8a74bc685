from app.services.match_service import (
    compute_skill_match,
    job_match_message,
    match_skill,
    normalize_skills,
)


class TestSkillMatching:
    def test_substring_matches_both_ways(self):
        result = compute_skill_match(["React", "Node.js"], ["reactjs", "Java"])
        assert result["matched"] == ["reactjs"]
        assert result["match_count"] == 1

        result = compute_skill_match(["JavaScript"], ["java"])
        assert result["matched"] == ["java"]

    def test_case_and_whitespace_ignored(self):
        result = compute_skill_match(["  PYTHON "], ["python", "Python "])
        assert result["matched"] == ["python"]

    def test_no_overlap(self):
        assert compute_skill_match(["React", "Node.js"], ["Java", "C++"])["matched"] == []

    def test_empty_sides(self):
        assert compute_skill_match([], ["React"])["matched"] == []
        assert compute_skill_match(["React"], [])["matched"] == []

    def test_exact_beats_substring(self):
        hit = match_skill("react", ["react native", "react"])
        assert hit.required_skill == "react"
        assert hit.exact

    def test_first_substring_in_job_order(self):
        hit = match_skill("sql", ["postgresql", "mysql"])
        assert hit.required_skill == "postgresql"
        assert not hit.exact

    def test_each_candidate_skill_counted_once(self):
        result = compute_skill_match(["java", "javascript"], ["java"])
        assert result["match_count"] == 1
        assert result["exact_count"] == 1


class TestNormalizeSkills:
    def test_comma_string(self):
        assert normalize_skills(" React , ,Node.js,") == ["React", "Node.js"]

    def test_list(self):
        assert normalize_skills(["Python", "", "  SQL "]) == ["Python", "SQL"]

    def test_empty(self):
        assert normalize_skills(None) == []
        assert normalize_skills("") == []


class TestMatchMessage:
    def test_one_skill(self):
        assert job_match_message("Dev", "Acme", ["react"]) == 'A new job "Dev" at Acme matches your skill: react.'

    def test_two_skills(self):
        msg = job_match_message("Dev", "Acme", ["react", "node"])
        assert msg == 'A new job "Dev" at Acme matches your skills: react, node.'

    def test_many_skills(self):
        msg = job_match_message("Dev", "Acme", ["react", "node", "sql"])
        assert msg == 'A new job "Dev" at Acme matches 3 of your skills.'
