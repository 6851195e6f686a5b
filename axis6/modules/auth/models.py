# Accounts live in Supabase Auth (auth.users); this module owns no table.

"""
Account lifecycle as seen by the API:

register  -> auth.sign_up() with name/timezone in user_metadata, then the
             axis6_profiles row is written right away (onboarded = false)
login     -> auth.sign_in_with_password(); a missing profile is created here
             too, for accounts made from the dashboard or another client
/auth/me  -> token owner plus profile

Bearer tokens are resolved with auth.get_user(jwt). Results are kept in
process for 60 seconds under the SHA-256 of the token (never the raw token),
at most 500 entries; logout drops the caller's entry.
"""
