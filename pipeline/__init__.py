"""
Page image transcription pipeline.

Stages of one run:
1. list - sorted image names from the input directory
2. resize - downscale each page to the configured longest side
3. recognize - vision model transcription with retries and cost tracking
4. format - ordered transcript with carried-forward page dates
"""
