"""Print the Supabase schema for Apt Mastery Hub (run it in the Supabase SQL Editor)."""
import os

from dotenv import load_dotenv

from engine import POINTS_CORRECT, POINTS_INCORRECT

load_dotenv()

SUPABASE_URL = os.getenv("SUPABASE_URL")

# SQL schema
SCHEMA_SQL = f"""
CREATE TYPE question_domain AS ENUM ('aptitude', 'reasoning', 'verbal', 'technical', 'general_knowledge');

-- Question bank (read-only to the app)
CREATE TABLE IF NOT EXISTS questions (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    question_text TEXT NOT NULL,
    option_a TEXT NOT NULL,
    option_b TEXT NOT NULL,
    option_c TEXT NOT NULL,
    option_d TEXT NOT NULL,
    correct_answer TEXT NOT NULL,
    explanation TEXT,
    domain question_domain NOT NULL,
    sub_topic TEXT,
    source VARCHAR(50),
    created_at TIMESTAMPTZ DEFAULT NOW()
);

-- One row per user, created at sign-up
CREATE TABLE IF NOT EXISTS profiles (
    id UUID PRIMARY KEY REFERENCES auth.users(id) ON DELETE CASCADE,
    full_name TEXT,
    current_streak INT NOT NULL DEFAULT 0,
    total_points INT NOT NULL DEFAULT 0,
    last_active_date DATE,
    created_at TIMESTAMPTZ DEFAULT NOW()
);

-- Append-only attempt log
CREATE TABLE IF NOT EXISTS user_progress (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    user_id UUID NOT NULL REFERENCES auth.users(id) ON DELETE CASCADE,
    question_id UUID NOT NULL REFERENCES questions(id) ON DELETE CASCADE,
    is_correct BOOLEAN NOT NULL,
    created_at TIMESTAMPTZ DEFAULT NOW()
);

-- Per-domain aggregate, maintained by trigger
CREATE TABLE IF NOT EXISTS domain_mastery (
    user_id UUID NOT NULL REFERENCES auth.users(id) ON DELETE CASCADE,
    domain question_domain NOT NULL,
    total_attempted INT NOT NULL DEFAULT 0,
    total_correct INT NOT NULL DEFAULT 0,
    accuracy_percentage NUMERIC(5,2) NOT NULL DEFAULT 0,
    PRIMARY KEY (user_id, domain)
);

CREATE OR REPLACE FUNCTION apply_attempt() RETURNS TRIGGER AS $$
DECLARE
    q_domain question_domain;
BEGIN
    SELECT domain INTO q_domain FROM questions WHERE id = NEW.question_id;

    INSERT INTO domain_mastery (user_id, domain, total_attempted, total_correct, accuracy_percentage)
    VALUES (NEW.user_id, q_domain, 1, NEW.is_correct::int, CASE WHEN NEW.is_correct THEN 100 ELSE 0 END)
    ON CONFLICT (user_id, domain) DO UPDATE SET
        total_attempted = domain_mastery.total_attempted + 1,
        total_correct = domain_mastery.total_correct + EXCLUDED.total_correct,
        accuracy_percentage = 100.0 * (domain_mastery.total_correct + EXCLUDED.total_correct)
                              / (domain_mastery.total_attempted + 1);

    UPDATE profiles SET
        total_points = total_points + CASE WHEN NEW.is_correct THEN {POINTS_CORRECT} ELSE {POINTS_INCORRECT} END,
        current_streak = CASE
            WHEN last_active_date = CURRENT_DATE THEN current_streak
            WHEN last_active_date = CURRENT_DATE - 1 THEN current_streak + 1
            ELSE 1
        END,
        last_active_date = CURRENT_DATE
    WHERE id = NEW.user_id;
    RETURN NEW;
END;
$$ LANGUAGE plpgsql SECURITY DEFINER;

DROP TRIGGER IF EXISTS on_attempt_inserted ON user_progress;
CREATE TRIGGER on_attempt_inserted AFTER INSERT ON user_progress
    FOR EACH ROW EXECUTE FUNCTION apply_attempt();

-- Row level security
ALTER TABLE user_progress ENABLE ROW LEVEL SECURITY;
ALTER TABLE domain_mastery ENABLE ROW LEVEL SECURITY;
ALTER TABLE profiles ENABLE ROW LEVEL SECURITY;
CREATE POLICY "own progress" ON user_progress FOR ALL USING (auth.uid() = user_id) WITH CHECK (auth.uid() = user_id);
CREATE POLICY "own mastery" ON domain_mastery FOR SELECT USING (auth.uid() = user_id);
CREATE POLICY "profiles readable" ON profiles FOR SELECT USING (true);

-- Create indexes for performance
CREATE INDEX IF NOT EXISTS idx_questions_domain ON questions(domain);
CREATE INDEX IF NOT EXISTS idx_user_progress_user_id ON user_progress(user_id);
CREATE INDEX IF NOT EXISTS idx_profiles_total_points ON profiles(total_points DESC);
"""


def main():
    print("Apt Mastery Hub schema")
    print(f"URL: {SUPABASE_URL or '(SUPABASE_URL not set)'}")
    print("\nRun this SQL in the Supabase SQL Editor:")
    print(SCHEMA_SQL)


if __name__ == "__main__":
    main()
