"""
Job dashboard API - Flask app serving the cursor-paginated job listing
and the save/archive/read/applied mutations.
"""
